from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import httpx

from ..config import PROVIDERS
from ..exceptions import (
    DeadlineExceededError,
    EmptyResponseError,
    ProviderAPIError,
    TransportError,
)

logger = logging.getLogger(__name__)

COMMIT_MAX_TOKENS = 1024
CONTENT_MAX_TOKENS = 2048


class BaseDriver(ABC):
    """Abstract base for one text-generation backend.

    A driver owns the wire format of a single provider: request shape,
    authentication, endpoint and extraction of the generated text. It makes
    exactly one outbound call per method invocation, bounded by ``deadline``
    seconds, and raises a ``ProviderError`` subclass tagged with its name on
    any failure. Fallback between drivers is the ProviderManager's job.
    """

    #: Key in ``config.PROVIDERS``.
    key: str = ""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> None:
        defaults = PROVIDERS[self.key]
        self._api_key = api_key
        self.model = model or defaults["model"]
        self.endpoint = (endpoint or defaults["endpoint"]).rstrip("/")

    @property
    def name(self) -> str:
        return PROVIDERS[self.key]["display_name"]

    def __repr__(self) -> str:
        # Never leak the credential.
        return f"{type(self).__name__}(model={self.model!r})"

    def generate_commit_message(self, prompt: str, deadline: float) -> str:
        """Return the commit message, stripped, ready to apply."""
        return self._complete(prompt, deadline, COMMIT_MAX_TOKENS).strip()

    def generate_content(self, prompt: str, deadline: float) -> str:
        """Return the raw generated text, untrimmed."""
        return self._complete(prompt, deadline, CONTENT_MAX_TOKENS)

    @abstractmethod
    def _complete(self, prompt: str, deadline: float, max_tokens: int) -> str:
        raise NotImplementedError


class HTTPJSONDriver(BaseDriver):
    """Shared request/decode flow for drivers speaking plain JSON over httpx."""

    @abstractmethod
    def _request(
        self, prompt: str, max_tokens: int
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return ``(url, headers, payload)`` for one call."""

    @abstractmethod
    def _extract_text(self, data: Mapping[str, Any]) -> str:
        """Return the first result's text or raise EmptyResponseError."""

    def _complete(self, prompt: str, deadline: float, max_tokens: int) -> str:
        url, headers, payload = self._request(prompt, max_tokens)
        try:
            response = httpx.post(url, headers=headers, json=payload, timeout=deadline)
        except httpx.TimeoutException as e:
            raise DeadlineExceededError(self.name, deadline) from e
        except httpx.HTTPError as e:
            raise TransportError(
                self.name, f"{self.name}: failed to make request: {e}"
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                self.name, f"{self.name}: failed to decode response: {e}"
            ) from e
        if not isinstance(data, Mapping):
            raise TransportError(
                self.name, f"{self.name}: unexpected response shape"
            )

        error = data.get("error")
        if error:
            raise ProviderAPIError(self.name, _error_message(error))

        status = getattr(response, "status_code", 200)
        if status and int(status) >= 400:
            raise TransportError(
                self.name, f"{self.name}: HTTP {status} without error details"
            )
        return self._extract_text(data)


def _error_message(error: Any) -> str:
    if isinstance(error, Mapping):
        message = error.get("message")
        if message:
            return str(message)
    return str(error)


def empty_response(provider: str) -> EmptyResponseError:
    logger.debug("%s returned zero result entries", provider)
    return EmptyResponseError(provider, f"no response from {provider}")
