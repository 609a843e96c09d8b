"""Unit tests for agent_conversation.config."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_conversation.config import AgentConfig, FinalizePolicy, ModelConfig


class TestAgentConfigDefaults:
    def test_defaults(self) -> None:
        config = AgentConfig()
        assert config.max_iterations == 10
        assert config.finalize_after_each_call is FinalizePolicy.ONLY_WHEN_FRESH
        assert config.model == ModelConfig()

    def test_max_iterations_bounds(self) -> None:
        with pytest.raises(ValidationError):
            AgentConfig(max_iterations=0)
        with pytest.raises(ValidationError):
            AgentConfig(max_iterations=101)

    def test_policy_from_string(self) -> None:
        assert AgentConfig(finalize_after_each_call="always").finalize_after_each_call is FinalizePolicy.ALWAYS

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AgentConfig(finalize_after_each_call="sometimes")


class TestAgentConfigFromYaml:
    def test_loads_nested_model(self, tmp_path: Path) -> None:
        path = tmp_path / "agent.yaml"
        path.write_text(
            "context: You are a math tutor\n"
            "max_iterations: 4\n"
            "finalize_after_each_call: always\n"
            "model:\n"
            "  name: local-model\n"
            "  base_url: http://localhost:8000/v1\n",
            encoding="utf-8",
        )
        config = AgentConfig.from_yaml(path)
        assert config.context == "You are a math tutor"
        assert config.max_iterations == 4
        assert config.finalize_after_each_call is FinalizePolicy.ALWAYS
        assert config.model.name == "local-model"
        assert config.model.base_url == "http://localhost:8000/v1"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert AgentConfig.from_yaml(path) == AgentConfig()


class TestAgentConfigFromEnv:
    def test_reads_prefixed_variables(self) -> None:
        config = AgentConfig.from_env(
            {
                "AGENT_CONVERSATION_CONTEXT": "Be terse",
                "AGENT_CONVERSATION_MAX_ITERATIONS": "3",
                "AGENT_CONVERSATION_FINALIZE_POLICY": "always",
                "AGENT_CONVERSATION_MODEL": "gpt-4o",
                "AGENT_CONVERSATION_TEMPERATURE": "0.7",
            }
        )
        assert config.context == "Be terse"
        assert config.max_iterations == 3
        assert config.finalize_after_each_call is FinalizePolicy.ALWAYS
        assert config.model.name == "gpt-4o"
        assert config.model.temperature == pytest.approx(0.7)

    def test_empty_environment(self) -> None:
        assert AgentConfig.from_env({}) == AgentConfig()

    def test_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_CONVERSATION_MAX_ITERATIONS", "6")
        assert AgentConfig.from_env().max_iterations == 6
