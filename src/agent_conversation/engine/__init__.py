"""Reasoning engines.

Public surface
--------------
- Engine / EngineFactory      — protocols an agent consumes
- ReactEngine                 — default reason-and-act engine
- EngineError                 — base engine failure
- EmptyReplyError             — model returned no text
- MaxIterationsExceededError  — no answer within the iteration bound
"""
from __future__ import annotations

from agent_conversation.engine.base import (
    EmptyReplyError,
    Engine,
    EngineError,
    EngineFactory,
    MaxIterationsExceededError,
)
from agent_conversation.engine.react import ReactEngine

__all__ = [
    "EmptyReplyError",
    "Engine",
    "EngineError",
    "EngineFactory",
    "MaxIterationsExceededError",
    "ReactEngine",
]
