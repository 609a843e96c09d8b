"""Agent: session selection and delegation to a reasoning engine.

Every call resolves exactly one continuation mode, makes the matching
session active, builds an engine bound to it, and asks the engine for an
answer.

Continuation modes
------------------
- ``FreshStart``      — complete any active session and start a new one
- ``ResumeCurrent``   — keep extending the session built from a history
- ``ReplayHistory``   — build a new session from caller-supplied messages

Classes
-------
- Agent  — the conversational agent
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from agent_conversation.config import AgentConfig, FinalizePolicy
from agent_conversation.engine.base import Engine, EngineFactory
from agent_conversation.engine.react import ReactEngine
from agent_conversation.llm.base import LLM
from agent_conversation.session.state import Message, Session
from agent_conversation.tools import Tool, Toolchain

logger = logging.getLogger(__name__)

MessageHistory = Iterable[Union[Mapping[str, Any], Message]]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class EmptyTaskError(ValueError):
    """Raised when a task is empty or whitespace-only."""

    def __init__(self, message: str = "Task cannot be empty") -> None:
        super().__init__(message)


class EmptyHistoryError(ValueError):
    """Raised when a required message history is empty."""

    def __init__(self) -> None:
        super().__init__("Messages cannot be empty")


class NoActiveConversationError(ValueError):
    """Raised when continuing without a conversation to continue."""

    def __init__(self) -> None:
        super().__init__("No active conversation to continue")


# ---------------------------------------------------------------------------
# Continuation modes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FreshStart:
    """Start a brand-new empty session."""


@dataclass(frozen=True)
class ResumeCurrent:
    """Continue the session built from an earlier history."""


@dataclass(frozen=True)
class ReplayHistory:
    """Build a new session from ``messages``."""

    messages: tuple[Mapping[str, Any] | Message, ...]


ContinuationMode = Union[FreshStart, ResumeCurrent, ReplayHistory]


# ---------------------------------------------------------------------------
# Agent
# ---------------------------------------------------------------------------


class Agent:
    """A conversational agent backed by a model.

    Parameters
    ----------
    context:
        System prompt for the agent.  Defaults to ``config.context``.
    model:
        Model capability handed to the engine.
    tools:
        ``Tool`` instances or plain callables the engine may use.
    engine:
        Engine class or factory called with
        ``(context, model, tools, session, max_iterations)`` once per call.
    config:
        Agent settings.  Defaults to ``AgentConfig()``.
    max_iterations:
        Overrides ``config.max_iterations`` when given.  Must lie in the
        same 1..100 range.

    Raises
    ------
    pydantic.ValidationError
        If ``max_iterations`` is out of range.

    Only the most recent session is ever mutated.  An agent is not safe for
    concurrent calls.
    """

    def __init__(
        self,
        context: str | None = None,
        *,
        model: LLM,
        tools: Iterable[Tool | Callable[[str], object]] | Toolchain = (),
        engine: EngineFactory | type = ReactEngine,
        config: AgentConfig | None = None,
        max_iterations: int | None = None,
    ) -> None:
        self.config = config or AgentConfig()
        if max_iterations is not None:
            # Same bounds as the configured value.
            self.config = type(self.config).model_validate(
                {**self.config.model_dump(), "max_iterations": max_iterations}
            )
        self.context = context if context is not None else self.config.context
        self.model = model
        self.tools = tools if isinstance(tools, Toolchain) else Toolchain(tools)
        self.max_iterations = self.config.max_iterations
        self._engine_factory = engine
        self._sessions: list[Session] = []
        self._current: Session | None = None
        self._continuing = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session | None:
        """The session created most recently, or None before the first call."""
        return self._current

    @property
    def sessions(self) -> tuple[Session, ...]:
        """Every session this agent has created, oldest first."""
        return tuple(self._sessions)

    @property
    def running(self) -> bool:
        """True when the current session exists and is active."""
        return self._current is not None and self._current.active

    @property
    def continuing(self) -> bool:
        """True when the current session came from a supplied history."""
        return self._continuing

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        task: str,
        *,
        messages: MessageHistory | None = None,
        return_session: bool = False,
    ) -> str | tuple[str, Session]:
        """Answer ``task``, starting, resuming, or replaying a session.

        Parameters
        ----------
        task:
            The task or message to process.
        messages:
            Optional message history to continue from.  A non-empty history
            always starts a new session holding those messages.
        return_session:
            Return ``(answer, session)`` instead of just the answer.

        Returns
        -------
        str | tuple[str, Session]
            The engine's answer, optionally with the session used.

        Raises
        ------
        EmptyTaskError
            If ``task`` is empty or whitespace-only.
        MessageFormatError
            If ``messages`` contains a malformed entry.
        NoActiveConversationError
            If resuming and no session exists.
        """
        if task is None or not str(task).strip():
            raise EmptyTaskError()

        mode = self.resolve_mode(messages)
        session = self._enter(mode)
        try:
            answer = self._build_engine(session).reason(task)
        finally:
            if self._should_finalize(mode):
                self._complete_session()
        return (answer, session) if return_session else answer

    def continue_conversation(
        self,
        messages_or_task: MessageHistory | str,
        new_task: str | None = None,
    ) -> str:
        """Continue a conversation (legacy two-form entry point).

        With a string, the string is the new task and the session from the
        last supplied history is extended.  Otherwise the first argument is a
        full message history and ``new_task`` is required.

        Raises
        ------
        EmptyTaskError
            If the task is empty.
        EmptyHistoryError
            If the supplied history is empty.
        NoActiveConversationError
            If given a bare task with no conversation to continue.
        """
        if isinstance(messages_or_task, str):
            if not messages_or_task.strip():
                raise EmptyTaskError()
            if not self._continuing or self._current is None:
                raise NoActiveConversationError()
            return self.run(messages_or_task)

        history = tuple(messages_or_task)
        if not history:
            raise EmptyHistoryError()
        if new_task is None or not str(new_task).strip():
            raise EmptyTaskError("New task cannot be empty")
        return self.run(new_task, messages=history)

    def resolve_mode(self, messages: MessageHistory | None = None) -> ContinuationMode:
        """Decide how the next call picks its session.

        A non-empty ``messages`` replays that history; otherwise an agent
        already continuing resumes its session; otherwise a fresh session
        is started.
        """
        history = tuple(messages) if messages is not None else ()
        if history:
            return ReplayHistory(messages=history)
        if self._continuing:
            return ResumeCurrent()
        return FreshStart()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _enter(self, mode: ContinuationMode) -> Session:
        """Make the session for ``mode`` current and active."""
        if isinstance(mode, ReplayHistory):
            session = Session.from_messages(mode.messages)
            session.reactivate()
            self._adopt(session)
            self._continuing = True
            logger.debug(
                "Agent: replaying %d message(s) into session %s",
                len(mode.messages),
                session.session_id,
            )
        elif isinstance(mode, ResumeCurrent):
            session = self._current
            if session is None:
                raise NoActiveConversationError()
            if not session.active:
                session.reactivate()
            logger.debug("Agent: resuming session %s", session.session_id)
        else:
            self._complete_session()
            session = Session()
            session.start()
            self._adopt(session)
            self._continuing = False
            logger.debug("Agent: started session %s", session.session_id)
        return session

    def _adopt(self, session: Session) -> None:
        self._sessions.append(session)
        self._current = session

    def _should_finalize(self, mode: ContinuationMode) -> bool:
        if self.config.finalize_after_each_call == FinalizePolicy.ALWAYS:
            return True
        return isinstance(mode, FreshStart)

    def _complete_session(self) -> None:
        if self.running:
            self._current.complete()
            logger.debug("Agent: completed session %s", self._current.session_id)

    def _build_engine(self, session: Session) -> Engine:
        return self._engine_factory(
            self.context,
            self.model,
            self.tools,
            session,
            self.max_iterations,
        )
