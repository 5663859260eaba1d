"""JSON pretty printer with per-type colors.

Output is deterministic for a given value and depth:
- two spaces of indentation per nesting level
- empty containers render inline as [] and {}
- one element per line, separated by commas, no comma after the last one
- object keys keep insertion order and are never deduplicated
- strings and keys are JSON-escaped, so the uncolored output re-parses
"""

from __future__ import annotations

import io
import json
from typing import Any

from httpline.terminal import Painter

INDENT = "  "

NULL_STYLE = {"fg": "bright_magenta"}
BOOL_STYLE = {"fg": "magenta"}
NUMBER_STYLE = {"fg": "bright_cyan"}
STRING_STYLE = {"fg": "bright_green"}
KEY_STYLE = {"fg": "bright_yellow", "bold": True}
PUNCT_STYLE = {"fg": "bright_black"}


def _escape(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)[1:-1]


def _number_text(value: int | float) -> str:
    # json.dumps spells out Infinity/NaN, which JSON5 input can produce.
    return json.dumps(value)


class JsonPrettyPrinter:
    """Renders parsed JSON values through a Painter."""

    def __init__(self, painter: Painter) -> None:
        self._painter = painter

    def print(self, value: Any, depth: int = 0) -> None:
        """Render value as if it starts at nesting level depth.

        Raises:
            TypeError: If value is not a JSON value.
        """
        write = self._painter.write
        if value is None:
            write("null", **NULL_STYLE)
        elif isinstance(value, bool):
            write("true" if value else "false", **BOOL_STYLE)
        elif isinstance(value, (int, float)):
            write(_number_text(value), **NUMBER_STYLE)
        elif isinstance(value, str):
            write('"', **STRING_STYLE)
            write(_escape(value), **STRING_STYLE)
            write('"', **STRING_STYLE)
        elif isinstance(value, list):
            self._print_array(value, depth)
        elif isinstance(value, dict):
            self._print_object(value, depth)
        else:
            raise TypeError(f"Not a JSON value: {type(value).__name__}")

    def _indent(self, depth: int) -> None:
        if depth > 0:
            self._painter.write(INDENT * depth)

    def _separator(self, index: int, count: int) -> None:
        if index < count - 1:
            self._painter.write(",", **PUNCT_STYLE)
        self._painter.line()

    def _print_array(self, values: list[Any], depth: int) -> None:
        self._painter.write("[", **PUNCT_STYLE)
        if values:
            self._painter.line()
            for index, item in enumerate(values):
                self._indent(depth + 1)
                self.print(item, depth + 1)
                self._separator(index, len(values))
            self._indent(depth)
        self._painter.write("]", **PUNCT_STYLE)

    def _print_object(self, mapping: dict[str, Any], depth: int) -> None:
        self._painter.write("{", **PUNCT_STYLE)
        if mapping:
            self._painter.line()
            for index, (key, item) in enumerate(mapping.items()):
                self._indent(depth + 1)
                self._painter.write('"', **PUNCT_STYLE)
                self._painter.write(_escape(key), **KEY_STYLE)
                self._painter.write('":', **PUNCT_STYLE)
                self._painter.write(" ")
                self.print(item, depth + 1)
                self._separator(index, len(mapping))
            self._indent(depth)
        self._painter.write("}", **PUNCT_STYLE)


def format_json(value: Any, depth: int = 0, color: bool = False) -> str:
    """Render value to a string. Mostly useful for tests and tooling."""
    buffer = io.StringIO()
    JsonPrettyPrinter(Painter(buffer, color=color)).print(value, depth)
    return buffer.getvalue()
