"""Agent configuration.

Classes
-------
- FinalizePolicy  — when the agent completes its session after a call
- ModelConfig     — settings for the built-in chat model
- AgentConfig     — top-level agent settings
"""
from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

ENV_PREFIX = "AGENT_CONVERSATION_"


class FinalizePolicy(str, Enum):
    """When an agent completes its current session after ``run``.

    ``ONLY_WHEN_FRESH`` leaves sessions built from a supplied history (or
    resumed from one) active so callers can keep extending them.
    ``ALWAYS`` completes every session once reasoning returns; a later
    continuation reactivates it.
    """

    ALWAYS = "always"
    ONLY_WHEN_FRESH = "only_when_fresh"


class ModelConfig(BaseModel):
    """Settings for ``OpenAIChatModel``.

    Parameters
    ----------
    name:
        Model identifier sent to the API.
    base_url:
        API base URL.  None uses the client default.
    temperature:
        Sampling temperature.
    timeout:
        Request timeout in seconds.
    max_retries:
        Attempts for transient HTTP failures.
    """

    name: str = "gpt-4o-mini"
    base_url: str | None = None
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    timeout: float = Field(default=120.0, gt=0.0)
    max_retries: int = Field(default=3, ge=1, le=10)


class AgentConfig(BaseModel):
    """Configuration parameters for ``Agent``.

    Parameters
    ----------
    context:
        System prompt describing the agent's role.
    max_iterations:
        Upper bound on model round-trips per call.  Default: 10.
    finalize_after_each_call:
        Session finalization policy.  Default: ``ONLY_WHEN_FRESH``.
    model:
        Built-in model settings.
    """

    context: str = "You are a helpful assistant."
    max_iterations: int = Field(default=10, ge=1, le=100)
    finalize_after_each_call: FinalizePolicy = FinalizePolicy.ONLY_WHEN_FRESH
    model: ModelConfig = Field(default_factory=ModelConfig)

    model_config = {"protected_namespaces": ()}

    @classmethod
    def from_yaml(cls, path: str | Path) -> AgentConfig:
        """Load configuration from a YAML file.

        An empty file yields the defaults.
        """
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> AgentConfig:
        """Build configuration from ``AGENT_CONVERSATION_*`` variables.

        Recognised: ``CONTEXT``, ``MAX_ITERATIONS``, ``FINALIZE_POLICY``,
        ``MODEL``, ``BASE_URL``, ``TEMPERATURE``.
        """
        env = os.environ if environ is None else environ
        data: dict[str, object] = {}
        model: dict[str, object] = {}
        if f"{ENV_PREFIX}CONTEXT" in env:
            data["context"] = env[f"{ENV_PREFIX}CONTEXT"]
        if f"{ENV_PREFIX}MAX_ITERATIONS" in env:
            data["max_iterations"] = env[f"{ENV_PREFIX}MAX_ITERATIONS"]
        if f"{ENV_PREFIX}FINALIZE_POLICY" in env:
            data["finalize_after_each_call"] = env[f"{ENV_PREFIX}FINALIZE_POLICY"]
        if f"{ENV_PREFIX}MODEL" in env:
            model["name"] = env[f"{ENV_PREFIX}MODEL"]
        if f"{ENV_PREFIX}BASE_URL" in env:
            model["base_url"] = env[f"{ENV_PREFIX}BASE_URL"]
        if f"{ENV_PREFIX}TEMPERATURE" in env:
            model["temperature"] = env[f"{ENV_PREFIX}TEMPERATURE"]
        if model:
            data["model"] = model
        return cls.model_validate(data)
