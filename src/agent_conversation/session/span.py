"""Execution-trace spans.

A span records one unit of work executed inside an active session.  The
unit of work is kept as a plain callable of the span's captured arguments
so that it can be re-run later without relying on closure state.

Classes
-------
- SpanType  — enum of span categories
- Span      — a single recorded unit of work and its output
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable
from uuid import uuid4

from pydantic import BaseModel, Field

SpanBody = Callable[[dict[str, Any]], Any]


class SpanType(str, Enum):
    """Categories of work recorded in a session trace."""

    INPUT = "input"
    LLM_CALL = "llm_call"
    TOOL_EXECUTION = "tool_execution"
    ANSWER = "answer"


class Span(BaseModel):
    """One recorded unit of work.

    Parameters
    ----------
    span_id:
        Unique identifier for this span.
    type:
        Category of the span (see ``SpanType``).  Free-form strings are
        accepted for custom engines.
    arguments:
        Options captured when the span was opened.  Passed to ``body``
        on every run.
    output:
        Result of the most recent run, or None before the first run.
    started_at:
        When the most recent run began (UTC).
    finished_at:
        When the most recent run ended (UTC).
    error:
        Text of the exception raised by the most recent run, if any.
    body:
        The unit of work.  Excluded from serialisation.
    """

    span_id: str = Field(default_factory=lambda: str(uuid4()))
    type: SpanType | str
    arguments: dict[str, Any] = Field(default_factory=dict)
    output: Any = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    error: str = ""
    body: SpanBody | None = Field(default=None, exclude=True, repr=False)

    model_config = {"frozen": False}

    def run(self, body: SpanBody | None = None) -> Any:
        """Execute the span's body and store its output.

        Parameters
        ----------
        body:
            Callable receiving ``arguments``.  Replaces any previously
            stored body when given.

        Returns
        -------
        Any
            The value returned by the body.
        """
        if body is not None:
            self.body = body
        if self.body is None:
            return self.output

        self.started_at = datetime.now(timezone.utc)
        self.finished_at = None
        self.error = ""
        try:
            self.output = self.body(dict(self.arguments))
        except Exception as exc:
            self.error = f"{type(exc).__name__}: {exc}"
            raise
        finally:
            self.finished_at = datetime.now(timezone.utc)
        return self.output

    def replay(self) -> Any:
        """Re-run the stored body with the captured arguments."""
        return self.run()

    @property
    def duration(self) -> float | None:
        """Seconds spent in the most recent run, or None if unfinished."""
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
