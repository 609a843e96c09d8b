"""Tool definitions and the toolchain handed to reasoning engines.

Classes
-------
- Tool               — a named callable the model may request
- Toolchain          — ordered, name-addressable collection of tools
- ToolNotFoundError  — lookup of an unregistered tool name

Functions
---------
- tool  — decorator turning a function into a ``Tool``
"""
from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class ToolNotFoundError(KeyError):
    """Raised when a tool name is not registered in the toolchain."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool {name!r} not found.")


@dataclass(frozen=True)
class Tool:
    """A single tool.

    Attributes:
        name: Name the model uses to request the tool.
        description: One-line description shown to the model.
        function: Callable receiving the tool input string.
    """

    name: str
    description: str
    function: Callable[[str], object]

    @classmethod
    def from_function(cls, function: Callable[[str], object], name: str | None = None) -> Tool:
        """Build a tool from a function, using its first docstring line."""
        doc = inspect.getdoc(function) or ""
        return cls(
            name=name or function.__name__,
            description=doc.splitlines()[0] if doc else "",
            function=function,
        )

    def __call__(self, argument: str) -> str:
        return str(self.function(argument))


def tool(function: Callable[[str], object] | None = None, *, name: str | None = None):
    """Decorate a function as a ``Tool``.

    Usable bare (``@tool``) or with a name override (``@tool(name="calc")``).
    """
    if function is None:
        return lambda fn: Tool.from_function(fn, name=name)
    return Tool.from_function(function, name=name)


class Toolchain:
    """Ordered collection of tools addressed by name.

    Parameters
    ----------
    tools:
        ``Tool`` instances or plain callables.  Callables are wrapped with
        ``Tool.from_function``.
    """

    def __init__(self, tools: Iterable[Tool | Callable[[str], object]] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for entry in tools:
            self.add(entry)

    def add(self, entry: Tool | Callable[[str], object]) -> Tool:
        """Register a tool, replacing any tool with the same name."""
        item = entry if isinstance(entry, Tool) else Tool.from_function(entry)
        if item.name in self._tools:
            logger.debug("Toolchain: replacing tool %r", item.name)
        self._tools[item.name] = item
        return item

    def find(self, name: str) -> Tool | None:
        """Return the tool called ``name``, or None."""
        return self._tools.get(name)

    def call(self, name: str, argument: str) -> str:
        """Run the tool called ``name`` with ``argument``.

        Raises
        ------
        ToolNotFoundError
            If no such tool is registered.
        """
        item = self.find(name)
        if item is None:
            raise ToolNotFoundError(name)
        logger.debug("Toolchain: calling %r", name)
        return item(argument)

    def describe(self) -> str:
        """Return one ``name: description`` line per tool."""
        return "\n".join(
            f"- {t.name}: {t.description}" if t.description else f"- {t.name}" for t in self
        )

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
