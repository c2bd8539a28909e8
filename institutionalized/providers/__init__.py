"""Backend drivers keyed by their preference name."""

from __future__ import annotations

from .anthropic_driver import ClaudeDriver
from .base import BaseDriver
from .gemini_driver import GeminiDriver
from .openai_driver import OpenAIDriver

DRIVERS: dict[str, type[BaseDriver]] = {
    "openai": OpenAIDriver,
    "gemini": GeminiDriver,
    "claude": ClaudeDriver,
}

__all__ = ["BaseDriver", "ClaudeDriver", "DRIVERS", "GeminiDriver", "OpenAIDriver"]
