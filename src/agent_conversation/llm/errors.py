"""Errors raised by the built-in chat model.

Engines let these propagate unchanged, so an ``Agent.run`` that fails on
the model side surfaces one of them to the caller after the session has
been finalized.  The ``chat`` command reports any ``LLMError`` and exits
with status 1.

Classes
-------
- LLMError           — base class; catch this to handle any model failure
- LLMConfigError     — the model cannot be built from the given settings
- LLMRateLimitError  — the provider kept refusing requests (HTTP 429)
- LLMAuthError       — the provider rejected the credentials
- LLMResponseError   — a reply arrived but holds no assistant message
"""
from __future__ import annotations


class LLMError(Exception):
    """Base class for failures while asking the model for a reply."""


class LLMConfigError(LLMError):
    """Raised when the chat model is constructed without usable settings.

    Typically no API key was passed and ``AGENT_CONVERSATION_API_KEY`` is
    unset.
    """


class LLMRateLimitError(LLMError):
    """Raised when the provider still answers HTTP 429 after every retry.

    Parameters
    ----------
    message:
        Human-readable description.
    retry_after:
        Seconds the provider asked callers to wait (``Retry-After``), or
        None when the header was absent or unparseable.
    """

    def __init__(self, message: str = "Rate limited", retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message)


class LLMAuthError(LLMError):
    """Raised on HTTP 401/403.  Never retried.

    Parameters
    ----------
    message:
        Human-readable description.
    status_code:
        The HTTP status the provider answered with, when known.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class LLMResponseError(LLMError):
    """Raised when a completion carries no ``choices[0].message``."""
