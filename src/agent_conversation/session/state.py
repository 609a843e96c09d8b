"""Conversation session domain models.

All types are Pydantic BaseModel subclasses to enable runtime validation
and JSON serialisation.

Classes
-------
- MessageRole  — enum of conversation roles
- Message      — an immutable conversation turn
- Session      — ordered message log, span trace, and start/end lifecycle

Session lifecycle
-----------------
``unstarted --start--> active --complete--> completed --reactivate--> active``

``reactivate`` on an unstarted session also makes it active.  No
transition discards messages or spans.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from agent_conversation.session.span import Span, SpanBody, SpanType

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class SessionError(Exception):
    """Base class for session lifecycle errors."""


class InactiveSessionError(SessionError):
    """Raised when an operation requires an active session."""


class AlreadyStartedError(SessionError):
    """Raised when ``start`` is called on a session that has a start time."""


class MessageFormatError(ValueError):
    """Base class for malformed message errors."""


class MessageTypeError(MessageFormatError):
    """Raised when a message is None or not a mapping."""


class MissingRoleError(MessageFormatError):
    """Raised when a message has no ``role`` key."""

    def __init__(self) -> None:
        super().__init__("Message must have 'role' key")


class MissingContentError(MessageFormatError):
    """Raised when a message has no ``content`` key."""

    def __init__(self) -> None:
        super().__init__("Message must have 'content' key")


class InvalidRoleError(MessageFormatError):
    """Raised when a message role is not user, assistant, or system."""

    def __init__(self, role: object) -> None:
        self.role = role
        super().__init__("Message role must be 'user', 'assistant', or 'system'")


class EmptyContentError(MessageFormatError):
    """Raised when message content is empty or whitespace-only."""

    def __init__(self) -> None:
        super().__init__("Message content cannot be empty")


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class MessageRole(str, Enum):
    """Roles a conversation turn can take."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    """A single conversation turn.

    Parameters
    ----------
    role:
        Who produced the turn.
    content:
        The text of the turn.
    """

    role: MessageRole
    content: str

    model_config = {"frozen": True}

    def as_dict(self) -> dict[str, Any]:
        """Return the ``{"role", "content"}`` mapping for this message."""
        return {"role": self.role, "content": self.content}


_ROLE_VALUES = frozenset(role.value for role in MessageRole)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class Session(BaseModel):
    """One conversation: its messages, execution spans, and timing.

    Parameters
    ----------
    session_id:
        Unique session identifier.
    messages:
        Insertion-ordered conversation turns.  Append-only.
    spans:
        Insertion-ordered execution trace.  The last span is current.
    start_time:
        When the session was first started or reactivated (UTC).
    end_time:
        When the session was last completed (UTC), or None.

    Not safe for concurrent mutation; serialise access per conversation.
    """

    session_id: str = Field(default_factory=lambda: str(uuid4()))
    messages: list[Message] = Field(default_factory=list)
    spans: list[Span] = Field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None

    model_config = {"frozen": False}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_messages(cls, messages: Iterable[Mapping[str, Any] | Message]) -> Session:
        """Build an unstarted session from an existing message history.

        Parameters
        ----------
        messages:
            Mappings with ``role`` and ``content`` keys, in order.

        Returns
        -------
        Session
            A new session holding the given messages.

        Raises
        ------
        MessageFormatError
            On the first malformed entry.
        """
        session = cls()
        for message in messages:
            session.add_message(message)
        return session

    @staticmethod
    def validate_message_format(message: object) -> None:
        """Check that ``message`` is an acceptable conversation turn.

        Raises
        ------
        MessageTypeError
            If ``message`` is not a mapping or its content is not a string.
        MissingRoleError
            If the ``role`` key is absent.
        MissingContentError
            If the ``content`` key is absent.
        InvalidRoleError
            If the role is not user, assistant, or system.
        EmptyContentError
            If the content is empty once stripped.
        """
        if isinstance(message, Message):
            return
        if not isinstance(message, Mapping):
            raise MessageTypeError("Message must be a mapping")
        if "role" not in message:
            raise MissingRoleError()
        if "content" not in message:
            raise MissingContentError()
        role = message["role"]
        if isinstance(role, MessageRole):
            role = role.value
        if not isinstance(role, str) or role not in _ROLE_VALUES:
            raise InvalidRoleError(message["role"])
        content = message["content"]
        if content is None or (isinstance(content, str) and not content.strip()):
            raise EmptyContentError()
        if not isinstance(content, str):
            raise MessageTypeError("Message content must be a string")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        """True when started and not completed."""
        return self.start_time is not None and self.end_time is None

    @property
    def completed(self) -> bool:
        """True when an end time is set."""
        return self.end_time is not None

    @property
    def duration(self) -> float | None:
        """Seconds between start and end (or now), None if never started."""
        if self.start_time is None:
            return None
        return ((self.end_time or _utcnow()) - self.start_time).total_seconds()

    def start(self) -> None:
        """Mark the session active.

        Raises
        ------
        AlreadyStartedError
            If the session has already been started.
        """
        if self.start_time is not None:
            raise AlreadyStartedError("Session already started")
        self.start_time = _utcnow()
        logger.debug("Session %s started", self.session_id)

    def complete(self) -> Any:
        """End the session and return the output of the current span.

        Raises
        ------
        InactiveSessionError
            If the session is not active.
        """
        if not self.active:
            raise InactiveSessionError("Cannot complete inactive session")
        self.end_time = _utcnow()
        logger.debug("Session %s completed", self.session_id)
        return self.result

    def reactivate(self) -> None:
        """Return a completed or unstarted session to the active state."""
        self.end_time = None
        if self.start_time is None:
            self.start_time = _utcnow()
        logger.debug("Session %s reactivated", self.session_id)

    # ------------------------------------------------------------------
    # Spans
    # ------------------------------------------------------------------

    def exec(
        self,
        type: SpanType | str,
        options: dict[str, Any] | None = None,
        body: SpanBody | None = None,
    ) -> Any:
        """Record a new span and run ``body`` through it.

        Parameters
        ----------
        type:
            Span category.
        options:
            Arguments captured on the span and passed to ``body``.
        body:
            Callable receiving the captured arguments.

        Returns
        -------
        Any
            The output of ``body``.

        Raises
        ------
        InactiveSessionError
            If the session is not active.
        """
        if not self.active:
            raise InactiveSessionError("Cannot execute span in inactive session")
        span = Span(type=type, arguments=dict(options or {}))
        self.spans.append(span)
        return span.run(body)

    def replay(self) -> Any:
        """Re-run every stored span in order and return the current output."""
        for span in self.spans:
            span.replay()
        return self.result

    @property
    def current_span(self) -> Span | None:
        """The most recent span, or None if no spans exist."""
        return self.spans[-1] if self.spans else None

    @property
    def result(self) -> Any:
        """Output of the current span, or None if no spans exist."""
        span = self.current_span
        return span.output if span is not None else None

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def add_message(self, message: Mapping[str, Any] | Message | None) -> Message:
        """Validate and append a message.

        Raises
        ------
        MessageFormatError
            If the message is None or malformed.
        """
        if message is None:
            raise MessageTypeError("Message cannot be None")
        self.validate_message_format(message)
        if not isinstance(message, Message):
            message = Message(role=message["role"], content=message["content"])
        self.messages.append(message)
        return message

    def add_user_message(self, content: str) -> Message:
        """Append a user turn."""
        return self.add_message({"role": MessageRole.USER, "content": content})

    def add_assistant_message(self, content: str) -> Message:
        """Append an assistant turn."""
        return self.add_message({"role": MessageRole.ASSISTANT, "content": content})

    def last_answer(self) -> Any:
        """Return the latest assistant reply.

        The most recent assistant message wins; otherwise the output of the
        most recent ``ANSWER`` span; otherwise None.
        """
        for message in reversed(self.messages):
            if message.role == MessageRole.ASSISTANT:
                return message.content
        for span in reversed(self.spans):
            if span.type == SpanType.ANSWER:
                return span.output
        return None

    def messages_for_export(self) -> list[dict[str, str]]:
        """Return every message with a synthesised ISO-8601 timestamp.

        Messages carry no send time of their own.  Timestamps are spread
        evenly from ``start_time`` to ``end_time`` (or now while active); an
        unstarted session stamps every message with the current time.

        Returns
        -------
        list[dict[str, str]]
            ``{"role", "content", "timestamp"}`` records in message order.
        """
        count = len(self.messages)
        now = _utcnow()
        exported: list[dict[str, str]] = []
        for index, message in enumerate(self.messages):
            if self.start_time is None:
                timestamp = now
            elif count == 1:
                timestamp = self.start_time
            else:
                elapsed = (self.end_time or now) - self.start_time
                timestamp = self.start_time + elapsed * (index / (count - 1))
            exported.append(
                {
                    "role": message.role.value,
                    "content": message.content,
                    "timestamp": timestamp.isoformat(),
                }
            )
        return exported
