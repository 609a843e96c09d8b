"""agent-conversation — Conversation sessions for model-backed agents.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import agent_conversation
>>> agent_conversation.__version__
'0.1.0'
"""
from __future__ import annotations

# Session core
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

# Agent
from agent_conversation.agent import (
    Agent,
    ContinuationMode,
    EmptyHistoryError,
    EmptyTaskError,
    FreshStart,
    NoActiveConversationError,
    ReplayHistory,
    ResumeCurrent,
)
from agent_conversation.config import AgentConfig, FinalizePolicy, ModelConfig

# Collaborators
from agent_conversation.engine import (
    EmptyReplyError,
    Engine,
    EngineError,
    MaxIterationsExceededError,
    ReactEngine,
)
from agent_conversation.llm import LLM, LLMError, LLMResult, OpenAIChatModel
from agent_conversation.tools import Tool, Toolchain, ToolNotFoundError, tool

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Session core
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
    # Agent
    "Agent",
    "AgentConfig",
    "ContinuationMode",
    "EmptyHistoryError",
    "EmptyTaskError",
    "FinalizePolicy",
    "FreshStart",
    "ModelConfig",
    "NoActiveConversationError",
    "ReplayHistory",
    "ResumeCurrent",
    # Collaborators
    "EmptyReplyError",
    "Engine",
    "EngineError",
    "LLM",
    "LLMError",
    "LLMResult",
    "MaxIterationsExceededError",
    "OpenAIChatModel",
    "ReactEngine",
    "Tool",
    "ToolNotFoundError",
    "Toolchain",
    "tool",
]
