from __future__ import annotations

from typing import Any, Mapping

from .base import HTTPJSONDriver, empty_response

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeDriver(HTTPJSONDriver):
    """Driver handling Anthropic API calls (messages endpoint)."""

    key = "claude"

    def _request(
        self, prompt: str, max_tokens: int
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        url = self.endpoint + "/v1/messages"
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        return url, headers, payload

    def _extract_text(self, data: Mapping[str, Any]) -> str:
        content = data.get("content") or []
        if not content:
            raise empty_response(self.name)
        return str(content[0].get("text", ""))
