"""Model capability protocol and result type.

Any object with an ``invoke(messages, **options)`` method returning an
``LLMResult`` can back an agent.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel


class LLMResult(BaseModel):
    """One generated reply.

    Parameters
    ----------
    content:
        Text of the reply.
    input_tokens:
        Prompt tokens billed for the call.
    output_tokens:
        Completion tokens billed for the call.
    model:
        Model name reported by the provider.
    """

    content: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""


@runtime_checkable
class LLM(Protocol):
    """Protocol for pluggable model clients."""

    def invoke(self, messages: list[dict[str, str]], **options: Any) -> LLMResult:
        """Generate a reply to ``messages``."""
        ...
