"""Scoped color output.

Color is decided per stream and per output section. A ColorScope turns
color on (if the stream warrants it) on entry and forces it off on exit,
so one section's colors cannot leak into a later write to another stream.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, TextIO

import click

from httpline.models import ColorMode


def is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def should_color(stream: TextIO, mode: ColorMode) -> bool:
    if mode is ColorMode.ALWAYS:
        return True
    if mode is ColorMode.NEVER:
        return False
    return is_terminal(stream)


class Painter:
    """Writes optionally styled text to one stream.

    With color off, click strips any styling, so callers style
    unconditionally and the painter decides.
    """

    def __init__(self, stream: TextIO, color: bool = False) -> None:
        self.stream = stream
        self.color = color

    def write(self, text: str, **style: Any) -> None:
        message = click.style(text, **style) if style else text
        click.echo(message, file=self.stream, nl=False, color=self.color)

    def line(self, text: str = "", **style: Any) -> None:
        self.write(text, **style)
        click.echo("", file=self.stream, color=self.color)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes, untouched by styling or decoding."""
        click.echo(data, file=self.stream, nl=False)


@contextmanager
def color_scope(stream: TextIO, mode: ColorMode = ColorMode.AUTO) -> Iterator[Painter]:
    """Yield a Painter for stream with color enabled only inside the block."""
    painter = Painter(stream, color=should_color(stream, mode))
    try:
        yield painter
    finally:
        painter.color = False
        stream.flush()
