"""Rendering and parsing of exported message histories.

Turns ``Session.messages_for_export`` records into JSON or YAML documents
and parses such documents back into ``{role, content}`` mappings that
``Session.from_messages`` accepts.  Storing the documents is left to the
caller.

Functions
---------
- dump_messages  — render a session's export records
- load_messages  — parse an export document into importable messages
"""
from __future__ import annotations

import json
from typing import Any, Literal

import yaml

from agent_conversation.session.state import Session

ExportFormat = Literal["json", "yaml"]

_SUPPORTED_FORMATS: frozenset[str] = frozenset({"json", "yaml"})


class ExportFormatError(ValueError):
    """Raised for an unknown format or a document that is not a message list."""


def _check_format(fmt: str) -> None:
    if fmt not in _SUPPORTED_FORMATS:
        supported = ", ".join(sorted(_SUPPORTED_FORMATS))
        raise ExportFormatError(
            f"Unsupported export format {fmt!r}. Supported formats: {supported}"
        )


def dump_messages(session: Session, fmt: ExportFormat = "json", *, indent: int = 2) -> str:
    """Render the session's exported messages.

    Parameters
    ----------
    session:
        The session to export.
    fmt:
        ``"json"`` (default) or ``"yaml"``.
    indent:
        JSON indentation level.

    Returns
    -------
    str
        The encoded document.
    """
    _check_format(fmt)
    records = session.messages_for_export()
    if fmt == "yaml":
        return yaml.dump(records, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return json.dumps(records, indent=indent, ensure_ascii=False)


def load_messages(raw: str, fmt: ExportFormat = "json") -> list[dict[str, Any]]:
    """Parse an export document into ``{role, content}`` mappings.

    Timestamps and any other extra keys are dropped.  Entries are not
    validated here; ``Session.from_messages`` does that.

    Raises
    ------
    ExportFormatError
        If ``fmt`` is unknown, the document cannot be parsed, or it is not
        a list of mappings.
    """
    _check_format(fmt)
    try:
        data = yaml.safe_load(raw) if fmt == "yaml" else json.loads(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ExportFormatError(f"Cannot parse {fmt} export document: {exc}") from exc
    if not isinstance(data, list):
        raise ExportFormatError("Export document must be a list of messages")

    messages: list[dict[str, Any]] = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ExportFormatError(f"Export entry must be a mapping, got {type(entry).__name__}")
        messages.append({key: entry[key] for key in ("role", "content") if key in entry})
    return messages
