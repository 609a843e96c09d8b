"""Conversation session subpackage.

Public surface
--------------
- Session            — message log, span trace, and start/end lifecycle
- Message            — immutable conversation turn
- MessageRole        — enum: USER, ASSISTANT, SYSTEM
- Span / SpanType    — execution-trace records
- dump_messages      — render an exported history as JSON or YAML
- load_messages      — parse an exported history back into messages
"""
from __future__ import annotations

from agent_conversation.session.span import Span, SpanType
from agent_conversation.session.state import (
    AlreadyStartedError,
    EmptyContentError,
    InactiveSessionError,
    InvalidRoleError,
    Message,
    MessageFormatError,
    MessageRole,
    MessageTypeError,
    MissingContentError,
    MissingRoleError,
    Session,
    SessionError,
)
from agent_conversation.session.export import ExportFormatError, dump_messages, load_messages

__all__ = [
    "AlreadyStartedError",
    "EmptyContentError",
    "ExportFormatError",
    "InactiveSessionError",
    "InvalidRoleError",
    "Message",
    "MessageFormatError",
    "MessageRole",
    "MessageTypeError",
    "MissingContentError",
    "MissingRoleError",
    "Session",
    "SessionError",
    "Span",
    "SpanType",
    "dump_messages",
    "load_messages",
]
