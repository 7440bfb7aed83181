"""Tests for the chat-completions client."""

from __future__ import annotations

import json

import httpx
import pytest

from utopian.client import ChatClient
from utopian.exceptions import ChatClientError
from utopian.models import ChatMessage, MessageRole

MESSAGES = [
    ChatMessage(role=MessageRole.SYSTEM, content="You are helpful"),
    ChatMessage(role=MessageRole.USER, content="Hello"),
]


def make_client(handler: httpx.MockTransport, **kwargs: object) -> ChatClient:
    return ChatClient("http://localhost:1234/v1/", api_key="secret", transport=handler, **kwargs)


class TestChatClient:
    """Test request building and response handling."""

    def test_request_shape(self) -> None:
        """Test URL, auth header and JSON body."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"choices": [{"message": {"role": "assistant", "content": "Hi there"}}]},
            )

        with make_client(httpx.MockTransport(handler), temperature=0.7, max_tokens=1000) as client:
            assert client.chat(MESSAGES, "openai/gpt-oss-20b") == "Hi there"

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://localhost:1234/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer secret"
        body = json.loads(request.content)
        assert body == {
            "model": "openai/gpt-oss-20b",
            "messages": [
                {"role": "system", "content": "You are helpful"},
                {"role": "user", "content": "Hello"},
            ],
            "temperature": 0.7,
            "max_tokens": 1000,
        }

    def test_error_status_carries_code_and_body(self) -> None:
        """Test a non-2xx response raises with status and body."""
        transport = httpx.MockTransport(lambda request: httpx.Response(429, text="slow down"))
        client = make_client(transport)

        with pytest.raises(ChatClientError, match="429 slow down") as exc_info:
            client.chat(MESSAGES, "m")
        assert exc_info.value.status_code == 429
        assert exc_info.value.body == "slow down"

    def test_no_choices_returns_empty_string(self) -> None:
        """Test an empty choices list degrades to an empty completion."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []}))
        assert make_client(transport).chat(MESSAGES, "m") == ""

    def test_missing_choices_key(self) -> None:
        """Test a response without choices degrades to an empty completion."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "x"}))
        assert make_client(transport).chat(MESSAGES, "m") == ""

    def test_null_content(self) -> None:
        """Test a null message content degrades to an empty completion."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"content": None}}]}),
        )
        assert make_client(transport).chat(MESSAGES, "m") == ""

    def test_transport_error(self) -> None:
        """Test connection failures are wrapped."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ChatClientError, match="connection refused"):
            make_client(httpx.MockTransport(handler)).chat(MESSAGES, "m")

    def test_invalid_json(self) -> None:
        """Test a non-JSON success body is reported."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ChatClientError, match="invalid JSON"):
            make_client(transport).chat(MESSAGES, "m")

    def test_message_without_content(self) -> None:
        """Test a message lacking content degrades to an empty completion."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"role": "assistant"}}]}),
        )
        assert make_client(transport).chat(MESSAGES, "m") == ""

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            None,
            "text",
            {"choices": {"message": "x"}},
            {"choices": ["x"]},
            {"choices": [{"message": "x"}]},
        ],
    )
    def test_unexpected_shape(self, payload: object) -> None:
        """Test bodies that are not chat-completion objects raise with the body attached."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
        with pytest.raises(ChatClientError) as exc_info:
            make_client(transport).chat(MESSAGES, "m")
        assert exc_info.value.status_code == 200
        assert exc_info.value.body is not None

    def test_content_parts_are_rejected(self) -> None:
        """Test list-of-parts content is reported instead of returned."""
        payload = {"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]}
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
        with pytest.raises(ChatClientError, match="non-text content"):
            make_client(transport).chat(MESSAGES, "m")
