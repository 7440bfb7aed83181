"""Minimal client for OpenAI-compatible chat-completions endpoints."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from .exceptions import ChatClientError
from .models import ChatMessage

DEFAULT_TIMEOUT_SECONDS = 300.0


class ChatBackend(Protocol):
    """Anything that turns a conversation into completion text."""

    def chat(self, messages: list[ChatMessage], model: str) -> str:
        """Return the completion text for a conversation."""
        ...


class ChatClient:
    """Sends conversations to ``<base_url>/chat/completions``."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "lm-studio",
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: API base URL (e.g., http://localhost:1234/v1)
            api_key: Bearer credential; local servers accept any value
            temperature: Sampling temperature sent with every request
            max_tokens: Completion length cap sent with every request
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._http = httpx.Client(
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        """Full chat-completions URL."""
        return f"{self.base_url}/chat/completions"

    def build_payload(self, messages: list[ChatMessage], model: str) -> dict[str, Any]:
        """Build the JSON request body."""
        return {
            "model": model,
            "messages": [m.model_dump(mode="json") for m in messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def chat(self, messages: list[ChatMessage], model: str) -> str:
        """Request a completion.

        Args:
            messages: Conversation so far
            model: Model identifier

        Returns:
            Content of the first choice, or an empty string if the
            response has no choices or the message has no content

        Raises:
            ChatClientError: On transport failure, non-2xx status or a
                malformed response body
        """
        try:
            response = self._http.post(
                self.endpoint,
                json=self.build_payload(messages, model),
            )
        except httpx.HTTPError as e:
            msg = f"Chat request to {self.endpoint} failed: {e}"
            raise ChatClientError(msg) from e

        if not response.is_success:
            msg = f"Chat API error: {response.status_code} {response.text}"
            raise ChatClientError(
                msg,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            msg = f"Chat API returned invalid JSON: {e}"
            raise ChatClientError(
                msg,
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not isinstance(data, dict):
            msg = f"Chat API returned unexpected {type(data).__name__} body"
            raise ChatClientError(msg, status_code=response.status_code, body=response.text)

        choices = data.get("choices") or []
        if not isinstance(choices, list):
            msg = f"Chat API returned unexpected choices ({type(choices).__name__})"
            raise ChatClientError(msg, status_code=response.status_code, body=response.text)
        if not choices:
            return ""
        choice = choices[0]
        message = (choice.get("message") or {}) if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            msg = "Chat API returned a malformed choice"
            raise ChatClientError(msg, status_code=response.status_code, body=response.text)

        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            msg = f"Chat API returned non-text content ({type(content).__name__})"
            raise ChatClientError(msg, status_code=response.status_code, body=response.text)
        return content

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._http.close()

    def __enter__(self) -> ChatClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
