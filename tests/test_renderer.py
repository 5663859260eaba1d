"""Tests for ResponseRenderer and scoped color output.

Tests cover:
- Status line colors per status class
- Header printing to the diagnostic stream
- Body routing: JSON pretty-printed, everything else raw bytes
- Color scoping (on inside the block only, auto = terminals only)
"""

import io
import json

import click
import httpx
import pytest

from httpline.errors import DecodeError, InvalidJsonError
from httpline.models import ColorMode, StatusClass
from httpline.pretty import format_json
from httpline.renderer import MASK, ResponseRenderer, mask_header, parse_json_body, status_color
from httpline.terminal import color_scope, should_color
from tests.conftest import JSON_HEADERS, BinaryStream, make_parsed_response


class FakeTerminal(io.StringIO):
    def isatty(self) -> bool:
        return True


def _renderer(color=ColorMode.NEVER, print_headers=False):
    out = BinaryStream()
    err = io.StringIO()
    return ResponseRenderer(print_headers=print_headers, color=color, out=out, err=err), out, err


class TestStatusColors:
    @pytest.mark.parametrize(
        "code,color",
        [
            (100, "blue"),
            (200, "green"),
            (204, "green"),
            (301, "yellow"),
            (404, "red"),
            (503, "red"),
            (99, None),
            (600, None),
        ],
    )
    def test_status_color(self, code, color):
        assert status_color(code) == color

    def test_status_class(self):
        assert StatusClass.of(404) is StatusClass.CLIENT_ERROR
        assert StatusClass.of(500) is StatusClass.SERVER_ERROR

    def test_status_line_colored(self):
        renderer, _, err = _renderer(color=ColorMode.ALWAYS)
        renderer.render_status(make_parsed_response(404))
        assert click.style("404 Not Found", bold=True, fg="red") in err.getvalue()
        assert click.unstyle(err.getvalue()) == "Status: 404 Not Found\n"

    def test_status_line_plain(self):
        renderer, out, err = _renderer()
        renderer.render_status(make_parsed_response(200))
        assert err.getvalue() == "Status: 200 OK\n"
        assert out.getvalue() == b""

    def test_unknown_reason(self):
        renderer, _, err = _renderer()
        renderer.render_status(make_parsed_response(599, reason_phrase=""))
        assert err.getvalue() == "Status: 599\n"


class TestHeaders:
    def test_headers_hidden_by_default(self):
        renderer, _, err = _renderer()
        renderer.render(make_parsed_response(200, headers=[("x-a", "1")]))
        assert "x-a" not in err.getvalue()

    def test_headers_printed_in_order_to_err(self):
        renderer, out, err = _renderer(print_headers=True)
        renderer.render(make_parsed_response(200, headers=[("x-b", "2"), ("x-a", "1=1")], body=b"ok"))
        assert err.getvalue() == "Status: 200 OK\nx-b=2\nx-a=1=1\n"
        assert out.getvalue() == b"ok"

    def test_header_name_bold_yellow(self):
        renderer, _, err = _renderer(color=ColorMode.ALWAYS, print_headers=True)
        renderer.render_headers(make_parsed_response(200, headers=[("server", "demo")]))
        assert err.getvalue() == click.style("server", bold=True, fg="yellow") + "=demo\n"


class TestBody:
    def test_raw_body_written_as_bytes(self):
        renderer, out, _ = _renderer()
        body = b"\x00\x01\xfe binary"
        renderer.render(make_parsed_response(200, headers=[("content-type", "image/png")], body=body))
        assert out.getvalue() == body

    def test_raw_body_never_colored(self):
        renderer, out, _ = _renderer(color=ColorMode.ALWAYS)
        renderer.render(make_parsed_response(200, body=b"plain text"))
        assert out.getvalue() == b"plain text"

    def test_json_body_pretty_printed(self):
        renderer, out, _ = _renderer()
        value = {"a": [1, 2], "b": None}
        renderer.render(make_parsed_response(200, headers=JSON_HEADERS, body=json.dumps(value).encode()))
        assert out.getvalue().decode() == format_json(value) + "\n"

    def test_json5_response_body(self):
        renderer, out, _ = _renderer()
        renderer.render(make_parsed_response(200, headers=JSON_HEADERS, body=b"{a: 1,}"))
        assert out.getvalue().decode() == '{\n  "a": 1\n}\n'

    def test_content_type_match_is_case_insensitive_on_name(self):
        response = make_parsed_response(200, headers=[("Content-Type", "application/json")], body=b"[]")
        assert response.is_json

    def test_json_detection_requires_application_json(self):
        assert not make_parsed_response(200, headers=[("content-type", "text/json")]).is_json
        assert not make_parsed_response(200, headers=[("x-content-type", "application/json")]).is_json

    def test_empty_json_body_prints_nothing(self):
        renderer, out, _ = _renderer()
        renderer.render(make_parsed_response(204, headers=JSON_HEADERS))
        assert out.getvalue() == b""

    def test_invalid_utf8_fails_after_status(self):
        renderer, out, err = _renderer(print_headers=True)
        with pytest.raises(DecodeError):
            renderer.render(make_parsed_response(200, headers=JSON_HEADERS, body=b'"\xff"'))
        assert err.getvalue().startswith("Status: 200 OK\ncontent-type=")
        assert out.getvalue() == b""

    def test_invalid_json_response(self):
        with pytest.raises(InvalidJsonError):
            parse_json_body(b"<html>oops</html>")


class TestRequestEcho:
    def test_credentials_masked(self):
        renderer, _, err = _renderer()
        request = httpx.Request(
            "POST",
            "https://example.com/x",
            headers=[("Authorization", "Basic c2VjcmV0"), ("Cookie", "sid=1"), ("X-Ok", "yes")],
        )
        renderer.render_request(request)
        output = err.getvalue()
        assert output.startswith("> POST https://example.com/x\n")
        assert "c2VjcmV0" not in output
        assert "sid=1" not in output
        assert f"> authorization: {MASK}" in output
        assert "> x-ok: yes" in output

    def test_mask_header(self):
        assert mask_header("Proxy-Authorization", "x") == MASK
        assert mask_header("Accept", "x") == "x"


class TestMessages:
    def test_error_line(self):
        renderer, _, err = _renderer()
        renderer.render_error('Invalid header: "x"')
        assert err.getvalue() == 'Error: Invalid header: "x"\n'

    def test_warning_line(self):
        renderer, _, err = _renderer()
        renderer.render_warning("careful")
        assert err.getvalue() == "Warning: careful\n"


class TestColorScope:
    def test_auto_colors_terminals_only(self):
        assert should_color(FakeTerminal(), ColorMode.AUTO)
        assert not should_color(io.StringIO(), ColorMode.AUTO)

    def test_explicit_modes(self):
        assert should_color(io.StringIO(), ColorMode.ALWAYS)
        assert not should_color(FakeTerminal(), ColorMode.NEVER)

    def test_color_disabled_on_exit(self):
        stream = FakeTerminal()
        with color_scope(stream) as painter:
            assert painter.color
            painter.write("in", fg="red")
        assert not painter.color
        painter.write("out", fg="red")
        assert stream.getvalue() == click.style("in", fg="red") + "out"

    def test_color_disabled_after_error(self):
        stream = FakeTerminal()
        with pytest.raises(RuntimeError):
            with color_scope(stream) as painter:
                raise RuntimeError("boom")
        assert not painter.color

    def test_scopes_are_independent(self):
        terminal = FakeTerminal()
        pipe = io.StringIO()
        with color_scope(terminal) as colored, color_scope(pipe) as plain:
            colored.write("a", fg="green")
            plain.write("b", fg="green")
        assert "\x1b[" in terminal.getvalue()
        assert pipe.getvalue() == "b"
