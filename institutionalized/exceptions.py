"""Exception hierarchy for institutionalized."""

from __future__ import annotations

from typing import Optional


class InstitutionalizedError(Exception):
    """Base exception for all institutionalized errors."""


class GitError(InstitutionalizedError):
    """Raised when a git or gh command fails."""


class ConfigError(InstitutionalizedError):
    """Raised for invalid preference values or unreadable config."""


class ValidationError(InstitutionalizedError):
    """Raised when command input is not usable (e.g. empty diff)."""


class LLMError(InstitutionalizedError):
    """Raised by the model invocation layer."""


class ProviderError(LLMError):
    """A single backend attempt failed."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider


class TransportError(ProviderError):
    """Network failure, undecodable body or bare HTTP error status."""


class DeadlineExceededError(ProviderError):
    """The attempt did not complete within its deadline."""

    def __init__(self, provider: str, deadline: float) -> None:
        super().__init__(
            provider,
            f"{provider} did not respond within {deadline:g}s",
        )
        self.deadline = deadline


class ProviderAPIError(ProviderError):
    """The response body itself carried a provider error."""

    def __init__(self, provider: str, provider_message: str) -> None:
        super().__init__(provider, f"{provider} API error: {provider_message}")
        self.provider_message = provider_message


class EmptyResponseError(ProviderError):
    """The response decoded fine but held no result entries."""

    def __init__(self, provider: str, detail: Optional[str] = None) -> None:
        super().__init__(provider, detail or f"empty response from {provider}")


class NoProvidersError(LLMError):
    """No backend is available for the call."""

    def __init__(self, message: str = "no providers available") -> None:
        super().__init__(message)


class AllProvidersFailedError(LLMError):
    """Every backend in the chain failed; wraps the last failure."""

    def __init__(self, provider: str, last_error: Exception) -> None:
        super().__init__(
            f"all providers failed, last error from {provider}: {last_error}"
        )
        self.provider = provider
        self.last_error = last_error


class PRParseError(LLMError):
    """A PR response did not contain the required markers."""


class MissingTitleError(PRParseError):
    def __init__(self) -> None:
        super().__init__("missing title: no TITLE: line found in LLM response")


class MissingBodyError(PRParseError):
    def __init__(self) -> None:
        super().__init__("missing body: no body found after BODY: in LLM response")
