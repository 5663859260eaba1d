"""Response renderer.

Metadata (status line, headers, verbose request echo) goes to the diagnostic
stream; the body goes to the primary stream so it can be redirected on its
own. JSON bodies are pretty-printed, everything else is written as raw bytes.
"""

from __future__ import annotations

import sys
from typing import TextIO

import httpx
import json5

from httpline.errors import DecodeError, InvalidJsonError
from httpline.models import ColorMode, ParsedResponse, StatusClass
from httpline.pretty import JsonPrettyPrinter
from httpline.terminal import color_scope

STATUS_COLORS: dict[StatusClass, str | None] = {
    StatusClass.INFORMATIONAL: "blue",
    StatusClass.SUCCESS: "green",
    StatusClass.REDIRECTION: "yellow",
    StatusClass.CLIENT_ERROR: "red",
    StatusClass.SERVER_ERROR: "red",
    StatusClass.UNKNOWN: None,
}

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie"}
MASK = "********"


def status_color(status_code: int) -> str | None:
    return STATUS_COLORS[StatusClass.of(status_code)]


def mask_header(name: str, value: str) -> str:
    if name.lower() in SENSITIVE_HEADERS:
        return MASK
    return value


class ResponseRenderer:
    """Prints a ParsedResponse.

    Usage:
        renderer = ResponseRenderer(print_headers=True)
        renderer.render(response)
    """

    def __init__(
        self,
        print_headers: bool = False,
        color: ColorMode = ColorMode.AUTO,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            print_headers: Also print every response header.
            color: Color policy; AUTO colors a stream only if it is a terminal.
            out: Primary stream for the body (default stdout).
            err: Diagnostic stream for metadata (default stderr).
        """
        self._print_headers = print_headers
        self._color = color
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def render(self, response: ParsedResponse) -> None:
        """Print status, optional headers, then the body.

        Status and headers are already written when body rendering fails;
        they are not rolled back.

        Raises:
            DecodeError: If a JSON body is not valid UTF-8.
            InvalidJsonError: If a JSON body does not parse.
        """
        self.render_status(response)
        if self._print_headers:
            self.render_headers(response)
        self.render_body(response)

    def render_status(self, response: ParsedResponse) -> None:
        with color_scope(self.err, self._color) as painter:
            painter.write("Status:", bold=True, underline=True)
            painter.write(" ")
            status = f"{response.status_code} {response.reason_phrase}".rstrip()
            painter.line(status, bold=True, fg=status_color(response.status_code))

    def render_headers(self, response: ParsedResponse) -> None:
        with color_scope(self.err, self._color) as painter:
            for name, value in response.headers:
                painter.write(name, bold=True, fg="yellow")
                painter.line(f"={value}")

    def render_body(self, response: ParsedResponse) -> None:
        if not response.body:
            return
        if not response.is_json:
            with color_scope(self.out, ColorMode.NEVER) as painter:
                painter.write_bytes(response.body)
            return

        value = parse_json_body(response.body)
        with color_scope(self.out, self._color) as painter:
            JsonPrettyPrinter(painter).print(value, 0)
            painter.line()

    def render_request(self, request: httpx.Request) -> None:
        """Echo the outgoing request line and headers, masking credentials."""
        with color_scope(self.err, self._color) as painter:
            painter.write("> ", fg="bright_black")
            painter.line(f"{request.method} {request.url}", bold=True)
            for name, value in request.headers.multi_items():
                painter.write("> ", fg="bright_black")
                painter.write(name, bold=True, fg="yellow")
                painter.line(f": {mask_header(name, value)}")

    def render_error(self, message: str) -> None:
        with color_scope(self.err, self._color) as painter:
            painter.write("Error:", fg="red", bold=True)
            painter.line(f" {message}")

    def render_warning(self, message: str) -> None:
        with color_scope(self.err, self._color) as painter:
            painter.write("Warning:", fg="yellow", bold=True)
            painter.line(f" {message}")


def parse_json_body(body: bytes) -> object:
    """Decode and parse a JSON response body (JSON5-tolerant).

    Raises:
        DecodeError: If the body is not valid UTF-8.
        InvalidJsonError: If the body does not parse.
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Response body is not valid UTF-8: {e}") from e
    try:
        return json5.loads(text)
    except ValueError as e:
        raise InvalidJsonError(str(e)) from e
