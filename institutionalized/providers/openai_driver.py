from __future__ import annotations

from typing import Any, Mapping, Optional

import openai

from ..exceptions import DeadlineExceededError, ProviderAPIError, TransportError
from .base import BaseDriver, empty_response


class OpenAIDriver(BaseDriver):
    """Driver for OpenAI chat completions via the official SDK.

    The SDK's own retries are disabled: one call per attempt, the
    ProviderManager decides what happens next.
    """

    key = "openai"

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
        client: Any = None,
    ) -> None:
        super().__init__(api_key, model=model, endpoint=endpoint)
        self._client = client or openai.OpenAI(
            api_key=api_key,
            base_url=self.endpoint,
            max_retries=0,
        )

    def _complete(self, prompt: str, deadline: float, max_tokens: int) -> str:
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                timeout=deadline,
            )
        except openai.APITimeoutError as e:
            raise DeadlineExceededError(self.name, deadline) from e
        except openai.APIConnectionError as e:
            raise TransportError(
                self.name, f"{self.name}: failed to make request: {e}"
            ) from e
        except openai.APIStatusError as e:
            raise ProviderAPIError(self.name, _status_message(e)) from e
        except openai.APIResponseValidationError as e:
            raise TransportError(
                self.name, f"{self.name}: failed to decode response: {e}"
            ) from e

        choices = getattr(resp, "choices", None) or []
        if not choices:
            raise empty_response(self.name)
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raise empty_response(self.name)
        return content


def _status_message(err: "openai.APIStatusError") -> str:
    # The SDK stores the decoded ``error`` object of the body on ``.body``.
    body = getattr(err, "body", None)
    if isinstance(body, Mapping):
        message = body.get("message")
        if message:
            return str(message)
    return str(getattr(err, "message", err))
