"""Pytest configuration and fixtures for httpline tests.

This file provides:
- make_parsed_response: ParsedResponse factory with sensible defaults
- RecordingTransport: httpx.MockTransport that remembers every request
- binary_stream: a text stream whose bytes can be inspected afterwards
- isolate_config: keeps the user's real config file out of every test
"""

from __future__ import annotations

import io
from typing import Callable

import httpx
import pytest

from httpline.models import ParsedResponse


def make_parsed_response(
    status_code: int = 200,
    headers: list[tuple[str, str]] | None = None,
    body: bytes = b"",
    reason_phrase: str | None = None,
) -> ParsedResponse:
    """Create a ParsedResponse for renderer tests.

    Prefer this over constructing ParsedResponse directly - the reason phrase
    defaults to the standard one for the status code.
    """
    if reason_phrase is None:
        reason_phrase = httpx.codes.get_reason_phrase(status_code)
    return ParsedResponse(
        status_code=status_code,
        reason_phrase=reason_phrase,
        headers=headers or [],
        body=body,
    )


JSON_HEADERS = [("content-type", "application/json; charset=utf-8")]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that records each request it handles.

    Usage:
        transport = RecordingTransport(lambda request: httpx.Response(200))
        ...
        assert transport.requests[0].method == "POST"
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


class BinaryStream(io.TextIOWrapper):
    """Text stream backed by BytesIO, so raw byte writes can be checked."""

    def __init__(self) -> None:
        super().__init__(io.BytesIO(), encoding="utf-8", newline="\n")

    def getvalue(self) -> bytes:
        self.flush()
        return self.buffer.getvalue()


@pytest.fixture
def binary_stream() -> BinaryStream:
    return BinaryStream()


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Point HOME at an empty directory and drop $HTTPLINE_CONFIG."""
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    monkeypatch.delenv("HTTPLINE_CONFIG", raising=False)
