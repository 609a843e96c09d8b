"""Reasoning engine protocol.

An engine is built once per agent call, bound to the session the agent
resolved, and turns a task into an answer.  While reasoning it appends the
task and the model's replies to the session and records spans.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from agent_conversation.llm.base import LLM
    from agent_conversation.session.state import Session
    from agent_conversation.tools import Toolchain


class EngineError(Exception):
    """Base class for reasoning engine failures."""


class MaxIterationsExceededError(EngineError):
    """Raised when the engine runs out of model round-trips."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"No answer after {max_iterations} iterations")


@runtime_checkable
class Engine(Protocol):
    """Protocol for reasoning engines."""

    def reason(self, task: str) -> str:
        """Return the answer to ``task``."""
        ...


@runtime_checkable
class EngineFactory(Protocol):
    """Builds an engine for one call.  Engine classes satisfy this."""

    def __call__(
        self,
        context: str,
        model: LLM,
        tools: Toolchain,
        session: Session,
        max_iterations: int,
    ) -> Engine:
        ...


class EmptyReplyError(EngineError):
    """Raised when the model returns no text."""

    def __init__(self) -> None:
        super().__init__("Model returned an empty reply")
