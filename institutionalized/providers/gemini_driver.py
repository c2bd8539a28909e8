from __future__ import annotations

from typing import Any, Mapping

from .base import HTTPJSONDriver, empty_response


class GeminiDriver(HTTPJSONDriver):
    """Driver for Google Gemini's ``generateContent`` endpoint."""

    key = "gemini"

    def _request(
        self, prompt: str, max_tokens: int
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        # The key must stay out of the URL: httpx logs request URLs.
        url = f"{self.endpoint}/models/{self.model}:generateContent"
        headers = {
            "x-goog-api-key": self._api_key,
            "content-type": "application/json",
        }
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"maxOutputTokens": max_tokens},
        }
        return url, headers, payload

    def _extract_text(self, data: Mapping[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            raise empty_response(self.name)
        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []
        if not parts:
            raise empty_response(self.name)
        return str(parts[0].get("text", ""))
