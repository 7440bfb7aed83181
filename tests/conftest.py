"""Shared fixtures for Utopian tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from utopian.exceptions import ChatClientError
from utopian.models import ChatMessage
from utopian.store import FileStore


class StubChat:
    """Chat backend that answers from a function and records every request."""

    def __init__(
        self,
        reply: Callable[[list[ChatMessage]], str] | None = None,
        fail_when: Callable[[int, list[ChatMessage]], bool] | None = None,
    ) -> None:
        self.reply = reply or (lambda messages: "Generated content")
        self.fail_when = fail_when
        self.calls: list[list[ChatMessage]] = []
        self.models: list[str] = []

    def chat(self, messages: list[ChatMessage], model: str) -> str:
        self.calls.append(messages)
        self.models.append(model)
        if self.fail_when is not None and self.fail_when(len(self.calls), messages):
            msg = "Chat API error: 500 upstream failure"
            raise ChatClientError(msg, status_code=500, body="upstream failure")
        return self.reply(messages)


@pytest.fixture
def store(tmp_path: Path) -> FileStore:
    """File store rooted at an empty temporary node directory."""
    return FileStore(tmp_path)


@pytest.fixture
def quiet_console() -> Console:
    """Console that discards output."""
    return Console(quiet=True)


@pytest.fixture
def stub_chat() -> StubChat:
    """Chat backend that always succeeds."""
    return StubChat()
