"""Body assembly - turns body flags into transmittable content.

Inline and file bodies become one byte sequence:
- '@path' fragments are read from disk ('@-' reads stdin)
- every other fragment is literal UTF-8 text
- fragments are concatenated in argument order
- URL-encoded bodies get an '&' before EVERY fragment, the first included
- JSON bodies require each fragment to parse (JSON5-tolerant) on its own

Form bodies become an ordered list of (name, value) text fields. The
transport encodes them as multipart/form-data with its own boundary.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

import json5

from httpline.errors import DecodeError, InputError, InvalidFormFieldError, InvalidJsonError
from httpline.models import BodyContent, BodyKind, BodySpec, FileBody, FormBody, InlineBody
from httpline.pairs import split_pairs

STDIN_PATH = "-"
FILE_PREFIX = "@"
URL_ENCODED_SEPARATOR = b"&"


class StdinReader:
    """Reads standard input to end-of-stream at most once.

    Later reads return the same bytes, so '-' may appear more than once
    without the second occurrence seeing an exhausted stream.
    """

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self._stream = stream
        self._data: bytes | None = None

    def read(self) -> bytes:
        if self._data is None:
            stream = self._stream if self._stream is not None else sys.stdin.buffer
            try:
                self._data = stream.read()
            except OSError as e:
                raise InputError(f"Cannot read standard input: {e}") from e
        return self._data


@dataclass
class AssembledBody:
    """Body ready for the request builder.

    Exactly one of content and form_fields is set, or neither for an
    empty body.
    """

    content: BodyContent | None = None
    form_fields: list[tuple[str, str]] = field(default_factory=list)
    content_type: str | None = None

    @property
    def is_form(self) -> bool:
        return bool(self.form_fields)

    @property
    def is_empty(self) -> bool:
        return self.content is None and not self.form_fields


def read_path(path: str, stdin: StdinReader) -> bytes:
    """Read a body file in full. '-' reads standard input.

    Raises:
        InputError: If the file cannot be read.
    """
    if path == STDIN_PATH:
        return stdin.read()
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise InputError(f"Cannot read body file '{path}': {e.strerror or e}") from e


def validate_json(content: BodyContent) -> None:
    """Check that content parses as JSON (JSON5-tolerant).

    Raises:
        DecodeError: If binary content is not valid UTF-8.
        InvalidJsonError: With the parser's diagnostic if it does not parse.
    """
    try:
        text = content.as_text()
    except UnicodeDecodeError as e:
        raise DecodeError(f"JSON body is not valid UTF-8: {e}") from e
    try:
        json5.loads(text)
    except ValueError as e:
        raise InvalidJsonError(str(e)) from e


def _load_fragment(fragment: str, stdin: StdinReader) -> BodyContent:
    if fragment.startswith(FILE_PREFIX):
        return BodyContent.from_bytes(read_path(fragment[len(FILE_PREFIX):], stdin))
    return BodyContent.from_text(fragment)


def assemble_fragments(
    fragments: list[str],
    body_kind: BodyKind,
    stdin: StdinReader,
) -> BodyContent:
    """Resolve and concatenate inline/file fragments.

    Fragments are resolved and validated one at a time in argument order,
    so the first invalid fragment (unreadable or not JSON) fails the body.
    """
    parts: list[BodyContent] = []
    for fragment in fragments:
        part = _load_fragment(fragment, stdin)
        if body_kind is BodyKind.JSON:
            validate_json(part)
        parts.append(part)

    chunks: list[bytes] = []
    for part in parts:
        if body_kind is BodyKind.URL_ENCODED:
            chunks.append(URL_ENCODED_SEPARATOR)
        chunks.append(part.as_bytes())
    data = b"".join(chunks)

    if all(part.is_text for part in parts):
        return BodyContent.from_text(data.decode("utf-8"))
    return BodyContent.from_bytes(data)


def assemble_form(fields: list[str]) -> list[tuple[str, str]]:
    """Split NAME=VALUE form fields, keeping argument order.

    Raises:
        InvalidFormFieldError: Naming the first field without '='.
    """
    return split_pairs(fields, InvalidFormFieldError)


def assemble_body(spec: BodySpec | None, stdin: StdinReader | None = None) -> AssembledBody:
    """Assemble the request body described by spec.

    Raises:
        InputError: If a file or stdin cannot be read.
        InvalidJsonError: If a JSON body fragment does not parse.
        DecodeError: If a JSON body fragment is not valid UTF-8.
        InvalidFormFieldError: If a form field has no '='.
    """
    if spec is None:
        return AssembledBody()

    stdin = stdin or StdinReader()
    source = spec.source

    if isinstance(source, FormBody):
        return AssembledBody(form_fields=assemble_form(source.fields))

    if isinstance(source, FileBody):
        fragments = [FILE_PREFIX + source.path]
    elif isinstance(source, InlineBody):
        fragments = source.fragments
    else:
        raise TypeError(f"Unknown body source: {source!r}")

    content = assemble_fragments(fragments, spec.body_kind, stdin)
    return AssembledBody(content=content, content_type=spec.body_kind.content_type)
