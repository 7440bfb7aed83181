"""Custom exceptions for Utopian."""

from typing import Any


class UtopianError(Exception):
    """Base exception for all Utopian errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(UtopianError):
    """Raised when settings are invalid or required artifacts are missing."""


class StoreError(UtopianError):
    """Raised when a node file exists but cannot be parsed."""


class CommandNotAllowedError(UtopianError):
    """Raised when a command is outside the runner allow-list."""


class CommandFailedError(UtopianError):
    """Raised when an allowed command exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: str,
        returncode: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.command = command
        self.returncode = returncode


class ChatClientError(UtopianError):
    """Raised when the chat-completions endpoint fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.body = body


class HITLDeclinedError(UtopianError):
    """Raised when the operator declines a human-in-the-loop checkpoint."""

    def __init__(self, step: str, preview_path: str) -> None:
        super().__init__(
            f"User cancelled operation at {step}",
            details={"step": step, "preview": preview_path},
        )
        self.step = step
        self.preview_path = preview_path
