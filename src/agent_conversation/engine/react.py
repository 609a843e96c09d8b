"""Reason-and-act engine.

The model is prompted to either request a tool with an ``Action:`` line or
finish with an ``Answer:`` line.  Tool output is fed back as an
``Observation:`` user turn until the model answers or the iteration budget
runs out.

Classes
-------
- ReactEngine  — default engine used by ``Agent``
"""
from __future__ import annotations

import logging
import re
from typing import Any

from agent_conversation.engine.base import EmptyReplyError, MaxIterationsExceededError
from agent_conversation.llm.base import LLM, LLMResult
from agent_conversation.session.span import SpanType
from agent_conversation.session.state import MessageRole, Session
from agent_conversation.tools import Toolchain, ToolNotFoundError

logger = logging.getLogger(__name__)

_ACTION_RE = re.compile(r"^\s*Action:\s*(?P<tool>[^|\n]+?)\s*(?:\|\s*(?P<input>.*))?$", re.MULTILINE)
_ANSWER_RE = re.compile(r"Answer:\s*(?P<answer>.*)", re.DOTALL)

_TOOL_INSTRUCTIONS = """\
You can use these tools:
{tools}

To use a tool, reply with a single line:
Action: <tool name> | <tool input>
You will receive the result as "Observation: <result>".
"""

_ANSWER_INSTRUCTIONS = 'When you know the final answer, reply with "Answer: <your answer>".'


class ReactEngine:
    """Default engine for ``Agent``.

    Parameters
    ----------
    context:
        The agent's system prompt.
    model:
        Model capability used for every round-trip.
    tools:
        Tools the model may request.
    session:
        Active session the engine reads from and appends to.
    max_iterations:
        Upper bound on model round-trips for one ``reason`` call.
    """

    def __init__(
        self,
        context: str,
        model: LLM,
        tools: Toolchain,
        session: Session,
        max_iterations: int,
        **options: Any,
    ) -> None:
        self.context = context
        self.model = model
        self.tools = tools
        self.session = session
        self.max_iterations = max_iterations
        self.options = options

    def system_prompt(self) -> str:
        """Return the agent context followed by tool and answer instructions."""
        parts = [self.context.strip()]
        if len(self.tools):
            parts.append(_TOOL_INSTRUCTIONS.format(tools=self.tools.describe()))
        parts.append(_ANSWER_INSTRUCTIONS)
        return "\n\n".join(part for part in parts if part)

    def reason(self, task: str) -> str:
        """Answer ``task``, appending every turn to the session.

        Raises
        ------
        MaxIterationsExceededError
            If the model has not answered after ``max_iterations`` replies.
        """
        self.session.exec(SpanType.INPUT, {"task": task}, lambda args: args["task"])
        self.session.add_user_message(task)

        for iteration in range(1, self.max_iterations + 1):
            reply = self._invoke()
            self.session.add_assistant_message(reply.content)

            action = _ACTION_RE.search(reply.content)
            if action is None:
                answer = self._extract_answer(reply.content)
                logger.debug("ReactEngine: answered after %d iteration(s)", iteration)
                return self.session.exec(SpanType.ANSWER, {"answer": answer}, lambda args: args["answer"])

            observation = self._run_tool(action.group("tool"), action.group("input") or "")
            self.session.add_user_message(f"Observation: {observation}")

        raise MaxIterationsExceededError(self.max_iterations)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _messages(self) -> list[dict[str, str]]:
        system = {"role": MessageRole.SYSTEM.value, "content": self.system_prompt()}
        history = [
            {"role": message.role.value, "content": message.content}
            for message in self.session.messages
        ]
        return [system, *history]

    def _invoke(self) -> LLMResult:
        reply = self.session.exec(
            SpanType.LLM_CALL,
            {"messages": self._messages(), "options": dict(self.options)},
            lambda args: self.model.invoke(args["messages"], **args["options"]),
        )
        if not reply.content.strip():
            raise EmptyReplyError()
        return reply

    def _run_tool(self, name: str, argument: str) -> str:
        name = name.strip()
        if name not in self.tools:
            logger.debug("ReactEngine: model requested unknown tool %r", name)
            return f"Unknown tool {name!r}"

        # Tool failures are reported back to the model as the observation.
        def call(args: dict[str, Any]) -> str:
            try:
                return self.tools.call(args["tool"], args["input"])
            except ToolNotFoundError:
                raise
            except Exception as exc:
                logger.warning("ReactEngine: tool %r failed: %s", args["tool"], exc)
                return f"Error: {exc}"

        return self.session.exec(SpanType.TOOL_EXECUTION, {"tool": name, "input": argument.strip()}, call)

    @staticmethod
    def _extract_answer(content: str) -> str:
        match = _ANSWER_RE.search(content)
        answer = match.group("answer") if match else content
        return answer.strip()
