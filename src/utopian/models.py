"""Core data models for Utopian knowledge nodes."""

from __future__ import annotations

import re
from datetime import date
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class MessageRole(str, Enum):
    """Role of a chat message sender."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single role-tagged message sent to the chat-completions endpoint."""

    role: MessageRole = Field(..., description="Who authored the message")
    content: str = Field(..., description="Message text")


class TrustNode(BaseModel):
    """An entry in the trust network."""

    model_config = ConfigDict(extra="allow")

    url: str = Field(..., description="Location of the trusted node")
    score: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Trust score between 0 and 1",
    )
    type: str | None = Field(default=None, description="Node category (core, org, ...)")
    description: str | None = Field(default=None, description="What the node is")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Reject empty URLs."""
        v = v.strip()
        if not v:
            msg = "Trust node URL must not be empty"
            raise ValueError(msg)
        return v


class KnownNodes(BaseModel):
    """Contents of trust/known_nodes.yaml.

    Unmodelled keys are kept and written back unchanged.
    """

    model_config = ConfigDict(extra="allow")

    nodes: list[TrustNode] = Field(default_factory=list)
    last_updated: str | None = Field(
        default=None,
        description="ISO timestamp of the last modification",
    )


class Foundations(BaseModel):
    """Contents of foundations/index.yaml."""

    principles: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)
    established: str = Field(
        default_factory=lambda: date.today().isoformat(),
        description="Date the foundations were established",
    )


class Topic(BaseModel):
    """A topic owned by the node, addressed by its kebab-case slug."""

    slug: str = Field(..., description="Unique kebab-case identifier")
    title: str = Field(..., description="Human-readable title")
    description: str = Field(default="", description="One-line summary")

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        """Validate slug is kebab-case."""
        if not SLUG_PATTERN.match(v):
            msg = "Topic slug must be kebab-case (e.g., climate-action)"
            raise ValueError(msg)
        return v


class CycleResult(BaseModel):
    """Outcome of one generation cycle."""

    iteration: int
    written: list[Path] = Field(default_factory=list)
    failures: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether every phase of the cycle succeeded."""
        return not self.failures


CRITICAL_TOPICS: tuple[Topic, ...] = (
    Topic(
        slug="climate-action",
        title="Climate Action & Sustainability",
        description=(
            "Addressing climate change through renewable energy, sustainable "
            "practices, and policy advocacy"
        ),
    ),
    Topic(
        slug="digital-rights",
        title="Digital Rights & AI Ethics",
        description="Ensuring ethical AI development and protecting digital rights for all",
    ),
    Topic(
        slug="global-health-equity",
        title="Global Health Equity",
        description="Ensuring healthcare access and addressing global health disparities",
    ),
)
