"""Runtime settings resolved from CLI options and the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError

OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENAI_DEFAULT_MODEL = "gpt-5"
LOCAL_BASE_URL = "http://localhost:1234/v1"
LOCAL_DEFAULT_MODEL = "openai/gpt-oss-20b"
LOCAL_API_KEY = "lm-studio"

TRUTHY = ("1", "true", "yes", "on")


class AgentSettings(BaseModel):
    """Everything one agent run needs, resolved up front.

    The auto flag is read from the environment once, here, and passed
    explicitly to every gate and loop afterwards.
    """

    cwd: Path = Field(default_factory=Path.cwd, description="Node directory")
    base_url: str = Field(default=LOCAL_BASE_URL, description="Chat API base URL")
    model: str = Field(default=LOCAL_DEFAULT_MODEL, description="Model identifier")
    api_key: str = Field(default=LOCAL_API_KEY, description="Bearer credential")
    auto: bool = Field(default=False, description="Skip all HITL confirmations")
    max_iterations: int = Field(default=50, ge=1, le=1000)
    success_delay: float = Field(default=2.0, ge=0.0)
    failure_delay: float = Field(default=10.0, ge=0.0)
    research_topics_per_cycle: int = Field(default=2, ge=0)
    images: bool = Field(default=False, description="Enable the image phase")
    images_per_cycle: int = Field(default=2, ge=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, ge=1)
    compile_slides: bool = Field(default=False)
    commit: bool = Field(default=False)

    @property
    def uses_cloud(self) -> bool:
        """Whether the run targets the hosted API rather than a local server."""
        return self.base_url.rstrip("/") == OPENAI_BASE_URL

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> AgentSettings:
        """Resolve settings, letting explicit overrides win over the environment.

        Args:
            env: Environment mapping, defaults to ``os.environ``
            **overrides: Explicit values (CLI options); ``None`` means unset

        Returns:
            Validated settings

        Raises:
            ConfigurationError: If a value fails validation
        """
        env = os.environ if env is None else env
        api_key = env.get("OPENAI_API_KEY", "").strip()

        if api_key:
            data: dict[str, Any] = {
                "base_url": OPENAI_BASE_URL,
                "model": OPENAI_DEFAULT_MODEL,
                "api_key": api_key,
            }
        else:
            data = {
                "base_url": env.get("LMSTUDIO_BASE_URL") or LOCAL_BASE_URL,
                "model": env.get("LMSTUDIO_MODEL") or LOCAL_DEFAULT_MODEL,
                "api_key": env.get("LMSTUDIO_API_KEY") or LOCAL_API_KEY,
            }

        env_auto = (env.get("UTOPIAN_AUTO") or env.get("AUTO") or "").lower() in TRUTHY
        data["auto"] = env_auto

        for key, value in overrides.items():
            if value is None:
                continue
            if key == "auto":
                data["auto"] = bool(value) or env_auto
            else:
                data[key] = value

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid settings: {e}"
            raise ConfigurationError(msg) from e
