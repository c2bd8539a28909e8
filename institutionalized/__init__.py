"""institutionalized - AI-generated commit messages and pull requests."""

from importlib import import_module
from typing import TYPE_CHECKING

__version__ = "1.0.0"

# Public API (lazy-exported to avoid import-time side effects)
__all__ = [
    # Preferences
    "Preferences", "load_preferences",
    # LLM
    "ProviderManager", "build_provider_chain",
    # Prompts and parsing
    "build_commit_prompt", "build_pr_prompt", "parse_pr_response", "emoji_for",
    # Exceptions
    "InstitutionalizedError", "GitError", "LLMError", "ConfigError",
    "ValidationError",
]


def __getattr__(name: str):
    """Lazy attribute loader so importing the package stays cheap.

    The provider drivers pull in the openai SDK; only pay for that when a
    caller actually touches the LLM layer.
    """
    mapping = {
        "Preferences": ("institutionalized.config", "Preferences"),
        "load_preferences": ("institutionalized.config", "load_preferences"),
        "ProviderManager": ("institutionalized.llm", "ProviderManager"),
        "build_provider_chain": ("institutionalized.llm", "build_provider_chain"),
        "build_commit_prompt": ("institutionalized.prompts", "build_commit_prompt"),
        "build_pr_prompt": ("institutionalized.prompts", "build_pr_prompt"),
        "parse_pr_response": ("institutionalized.parsing", "parse_pr_response"),
        "emoji_for": ("institutionalized.parsing", "emoji_for"),
        "InstitutionalizedError": (
            "institutionalized.exceptions",
            "InstitutionalizedError",
        ),
        "GitError": ("institutionalized.exceptions", "GitError"),
        "LLMError": ("institutionalized.exceptions", "LLMError"),
        "ConfigError": ("institutionalized.exceptions", "ConfigError"),
        "ValidationError": ("institutionalized.exceptions", "ValidationError"),
    }
    if name in mapping:
        mod_name, attr = mapping[name]
        mod = import_module(mod_name)
        value = getattr(mod, attr)
        globals()[name] = value  # cache for future access
        return value
    raise AttributeError(f"module 'institutionalized' has no attribute {name!r}")


if TYPE_CHECKING:
    from .config import Preferences, load_preferences
    from .llm import ProviderManager, build_provider_chain
    from .prompts import build_commit_prompt, build_pr_prompt
    from .parsing import parse_pr_response, emoji_for
    from .exceptions import (
        InstitutionalizedError,
        GitError,
        LLMError,
        ConfigError,
        ValidationError,
    )
