"""Unit tests for agent_conversation.engine.react.ReactEngine."""
from __future__ import annotations

from typing import Any

import pytest

from agent_conversation.engine.base import (
    EmptyReplyError,
    Engine,
    MaxIterationsExceededError,
)
from agent_conversation.engine.react import ReactEngine
from agent_conversation.llm.base import LLMResult
from agent_conversation.session.span import SpanType
from agent_conversation.session.state import MessageRole, Session
from agent_conversation.tools import Toolchain, tool


class ScriptedLLM:
    def __init__(self, *replies: str) -> None:
        self.replies = list(replies)
        self.calls: list[list[dict[str, str]]] = []
        self.options: list[dict[str, Any]] = []

    def invoke(self, messages: list[dict[str, str]], **options: Any) -> LLMResult:
        self.calls.append(messages)
        self.options.append(options)
        return LLMResult(content=self.replies.pop(0))


@tool
def add(expression: str) -> int:
    """Add two integers written as 'a+b'."""
    left, right = expression.split("+")
    return int(left) + int(right)


@tool
def explode(_: str) -> str:
    """Always fails."""
    raise RuntimeError("kaboom")


@pytest.fixture()
def session() -> Session:
    state = Session()
    state.start()
    return state


def make_engine(llm: ScriptedLLM, session: Session, max_iterations: int = 5, **options: Any) -> ReactEngine:
    return ReactEngine("You are a math tutor", llm, Toolchain([add, explode]), session, max_iterations, **options)


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------


class TestReactAnswers:
    def test_satisfies_engine_protocol(self, session: Session) -> None:
        assert isinstance(make_engine(ScriptedLLM(), session), Engine)

    def test_answer_prefix_stripped(self, session: Session) -> None:
        llm = ScriptedLLM("Thought: easy.\nAnswer: 4")
        assert make_engine(llm, session).reason("What's 2+2?") == "4"

    def test_reply_without_prefix_is_answer(self, session: Session) -> None:
        llm = ScriptedLLM("  Just four.  ")
        assert make_engine(llm, session).reason("What's 2+2?") == "Just four."

    def test_appends_user_and_assistant_messages(self, session: Session) -> None:
        llm = ScriptedLLM("Answer: Hi")
        make_engine(llm, session).reason("Hello")
        assert [m.as_dict() for m in session.messages] == [
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Answer: Hi"},
        ]

    def test_records_spans(self, session: Session) -> None:
        llm = ScriptedLLM("Answer: Hi")
        make_engine(llm, session).reason("Hello")
        assert [span.type for span in session.spans] == [
            SpanType.INPUT,
            SpanType.LLM_CALL,
            SpanType.ANSWER,
        ]
        assert session.result == "Hi"

    def test_system_prompt_then_history(self, session: Session) -> None:
        session.add_message({"role": "system", "content": "Prior instructions"})
        session.add_user_message("Earlier")
        llm = ScriptedLLM("Answer: ok")
        make_engine(llm, session).reason("Now")
        sent = llm.calls[0]
        assert sent[0]["role"] == "system"
        assert sent[0]["content"].startswith("You are a math tutor")
        assert [m["content"] for m in sent[1:]] == ["Prior instructions", "Earlier", "Now"]

    def test_system_prompt_lists_tools(self, session: Session) -> None:
        prompt = make_engine(ScriptedLLM(), session).system_prompt()
        assert "- add: Add two integers" in prompt
        assert "Action:" in prompt

    def test_system_prompt_without_tools(self, session: Session) -> None:
        engine = ReactEngine("ctx", ScriptedLLM(), Toolchain(), session, 3)
        assert "Action:" not in engine.system_prompt()

    def test_options_forwarded_to_model(self, session: Session) -> None:
        llm = ScriptedLLM("Answer: ok")
        make_engine(llm, session, temperature=0.5).reason("Hi")
        assert llm.options == [{"temperature": 0.5}]

    def test_empty_reply_raises(self, session: Session) -> None:
        with pytest.raises(EmptyReplyError):
            make_engine(ScriptedLLM("   "), session).reason("Hi")


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


class TestReactTools:
    def test_tool_observation_fed_back(self, session: Session) -> None:
        llm = ScriptedLLM("Action: add | 2+2", "Answer: 4")
        assert make_engine(llm, session).reason("What's 2+2?") == "4"
        contents = [m.content for m in session.messages]
        assert contents == ["What's 2+2?", "Action: add | 2+2", "Observation: 4", "Answer: 4"]
        assert session.messages[2].role is MessageRole.USER
        tool_spans = [s for s in session.spans if s.type == SpanType.TOOL_EXECUTION]
        assert tool_spans[0].arguments == {"tool": "add", "input": "2+2"}
        assert tool_spans[0].output == "4"

    def test_unknown_tool_reported(self, session: Session) -> None:
        llm = ScriptedLLM("Action: search | cats", "Answer: none")
        make_engine(llm, session).reason("Find cats")
        assert session.messages[2].content == "Observation: Unknown tool 'search'"

    def test_tool_error_reported(self, session: Session) -> None:
        llm = ScriptedLLM("Action: explode | x", "Answer: sorry")
        assert make_engine(llm, session).reason("Go") == "sorry"
        assert session.messages[2].content == "Observation: Error: kaboom"

    def test_max_iterations(self, session: Session) -> None:
        llm = ScriptedLLM("Action: add | 1+1", "Action: add | 1+1")
        with pytest.raises(MaxIterationsExceededError, match="2 iterations"):
            make_engine(llm, session, max_iterations=2).reason("Loop")
        assert len(llm.calls) == 2
