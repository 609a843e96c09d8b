"""Model clients.

Provides the ``LLM`` protocol, the ``LLMResult`` reply type, and a built-in
OpenAI-compatible client.
"""

from agent_conversation.llm.base import LLM, LLMResult
from agent_conversation.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
)
from agent_conversation.llm.openai import OpenAIChatModel

__all__ = [
    "LLM",
    "LLMAuthError",
    "LLMConfigError",
    "LLMError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMResult",
    "OpenAIChatModel",
]
