"""Utopian: scaffolding & content generation agent for Utopia knowledge nodes."""

__version__ = "0.1.0"
__author__ = "Utopian Contributors"
__description__ = "Scaffolding & content generation agent for Utopia knowledge nodes"

from .agent import AgentReport, run_agent
from .client import ChatClient
from .hitl import HITLGate
from .loop import GenerationLoop
from .models import ChatMessage, MessageRole, Topic, TrustNode
from .scaffold import Scaffolder
from .settings import AgentSettings
from .store import FileStore

__all__ = [
    "AgentReport",
    "AgentSettings",
    "ChatClient",
    "ChatMessage",
    "FileStore",
    "GenerationLoop",
    "HITLGate",
    "MessageRole",
    "Scaffolder",
    "Topic",
    "TrustNode",
    "run_agent",
]
