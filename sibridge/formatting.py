"""Selecting the textual form of a result and JSON output helpers."""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@runtime_checkable
class ResultData(Protocol):
    """Anything that can render itself as plain text, JSON or indented JSON."""

    def to_json(self) -> str: ...

    def to_string(self) -> str: ...

    def to_format(self) -> str: ...


def format_result(data: ResultData, is_format: bool, is_json: bool) -> str:
    """Render data as indented JSON, compact JSON or plain text, in that priority."""
    if is_format:
        return data.to_format()
    if is_json:
        return data.to_json()
    return data.to_string()


def to_json_text(obj: Any, indent: bool = False, sort_keys: bool = False) -> str:
    """Serialise obj as compact or tab-indented JSON with HTML-safe escaping."""
    if indent:
        text = json.dumps(obj, indent="\t", ensure_ascii=False, sort_keys=sort_keys)
    else:
        text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False, sort_keys=sort_keys)
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text