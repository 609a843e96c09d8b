"""OpenAI-compatible chat model over httpx with tenacity retry.

Reads configuration from constructor arguments or environment variables.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
import tenacity

from agent_conversation.llm.base import LLMResult
from agent_conversation.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)

logger = logging.getLogger(__name__)

API_KEY_ENV = "AGENT_CONVERSATION_API_KEY"
BASE_URL_ENV = "AGENT_CONVERSATION_BASE_URL"
DEFAULT_BASE_URL = "https://api.openai.com/v1"

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}


def _is_retryable(exc: BaseException) -> bool:
    """Return True when a failed completion request is worth sending again.

    Rate limits, gateway or server errors (500/502/503/504) and failed
    connections are transient.  Rejected credentials and other 4xx replies
    would fail identically on every attempt, so they surface at once.
    """
    if isinstance(exc, LLMAuthError):
        return False
    if isinstance(exc, LLMRateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


class OpenAIChatModel:
    """Chat-completions model implementing the ``LLM`` protocol.

    Usage::

        with OpenAIChatModel("gpt-4o-mini", api_key="sk-...") as model:
            result = model.invoke([{"role": "user", "content": "Hello"}])
            print(result.content)
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float = 0.0,
        timeout: float = 120.0,
        max_retries: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            model: Model name sent with every request.
            api_key: API key. Falls back to AGENT_CONVERSATION_API_KEY.
            base_url: API base URL. Falls back to AGENT_CONVERSATION_BASE_URL,
                then to https://api.openai.com/v1.
            temperature: Sampling temperature for calls that do not pass one.
            timeout: Request timeout in seconds.
            max_retries: Maximum attempts for retryable errors.
            transport: Optional httpx transport (used by tests).

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self.model = model
        self.temperature = temperature
        self._api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not self._api_key:
            raise LLMConfigError(
                f"No API key provided. Pass api_key= or set {API_KEY_ENV} "
                "environment variable."
            )
        self._base_url = (base_url or os.environ.get(BASE_URL_ENV, DEFAULT_BASE_URL)).rstrip("/")
        self._max_retries = max_retries
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
        )

    def invoke(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        stop: list[str] | None = None,
        **kwargs: Any,
    ) -> LLMResult:
        """Send a chat completion request with retry.

        Args:
            messages: Message dicts with 'role' and 'content'.
            temperature: Sampling temperature. Defaults to the model's
                configured temperature.
            stop: Stop sequences.
            **kwargs: Additional payload parameters forwarded to the API.

        Raises:
            LLMAuthError: On 401/403 (no retry).
            LLMRateLimitError: On 429 after all retries exhausted.
            LLMResponseError: On unexpected response format.
            httpx.HTTPStatusError: On other non-retryable HTTP errors.
        """
        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=(
                tenacity.wait_exponential(multiplier=1, min=1, max=30)
                + tenacity.wait_random(0, 2)
            ),
            stop=tenacity.stop_after_attempt(self._max_retries),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if stop:
            payload["stop"] = stop
        payload.update(kwargs)
        data = retryer(self._post, payload)
        return self._to_result(data)

    def _post(self, payload: dict[str, Any]) -> dict:
        """Execute a single chat completion request (no retry)."""
        response = self._client.post(f"{self._base_url}/chat/completions", json=payload)

        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise LLMAuthError(
                f"Authentication failed: HTTP {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After")
            retry_after: float | None = None
            if retry_after_raw is not None:
                try:
                    retry_after = float(retry_after_raw)
                except ValueError:
                    retry_after = None
            raise LLMRateLimitError(
                f"Rate limited: HTTP 429 - {response.text}",
                retry_after=retry_after,
            )

        response.raise_for_status()
        return response.json()

    def _to_result(self, data: dict) -> LLMResult:
        try:
            content = data["choices"][0]["message"].get("content") or ""
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise LLMResponseError(
                f"Cannot extract content from response: {exc}. Response: {data}"
            ) from exc
        usage = data.get("usage") or {}
        return LLMResult(
            content=content,
            input_tokens=usage.get("prompt_tokens") or 0,
            output_tokens=usage.get("completion_tokens") or 0,
            model=data.get("model") or self.model,
        )

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> OpenAIChatModel:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
