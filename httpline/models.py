"""Internal data models for httpline.

All models use Pydantic v2. Every model is built fresh from the command line
(and optional config file) for one invocation and discarded after rendering.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Self, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Request Models
# =============================================================================


class Method(str, Enum):
    """HTTP verbs accepted on the command line."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


class ShorthandAuth(BaseModel):
    """Full Authorization header value, passed through unchanged."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["shorthand"] = "shorthand"
    value: str = Field(repr=False, description="Raw Authorization header value")


class BasicAuth(BaseModel):
    """HTTP Basic credentials. A missing password is prompted for later."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["basic"] = "basic"
    username: str = Field(description="User name (everything before the first ':')")
    password: str | None = Field(
        default=None, repr=False, description="Password, None if it must be prompted for"
    )

    @classmethod
    def from_user_arg(cls, raw: str) -> BasicAuth:
        """Build from a USER[:PASSWORD] argument, splitting on the first ':'."""
        if ":" in raw:
            username, password = raw.split(":", 1)
            return cls(username=username, password=password)
        return cls(username=raw)


AuthSpec = Annotated[Union[ShorthandAuth, BasicAuth], Field(discriminator="kind")]


class BodyKind(str, Enum):
    """How the body is declared to the server. At most one kind per request."""

    RAW = "raw"
    JSON = "json"
    URL_ENCODED = "url_encoded"

    @property
    def content_type(self) -> str | None:
        if self is BodyKind.JSON:
            return "application/json"
        if self is BodyKind.URL_ENCODED:
            return "application/x-www-form-urlencoded"
        return None


class InlineBody(BaseModel):
    """Body fragments from -b/--body. '@path' fragments are read from files."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["inline"] = "inline"
    fragments: list[str] = Field(min_length=1, description="Fragments in argument order")


class FileBody(BaseModel):
    """Body read in full from one file, or from stdin when path is '-'."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["file"] = "file"
    path: str = Field(description="File path, '-' for standard input")


class FormBody(BaseModel):
    """Multipart form built from NAME=VALUE field strings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["form"] = "form"
    fields: list[str] = Field(min_length=1, description="Raw NAME=VALUE strings")


BodySource = Annotated[Union[InlineBody, FileBody, FormBody], Field(discriminator="kind")]


class BodySpec(BaseModel):
    """Where the body comes from and how it is declared."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: BodySource
    body_kind: BodyKind = BodyKind.RAW

    @model_validator(mode="after")
    def check_form_kind(self) -> Self:
        if isinstance(self.source, FormBody) and self.body_kind is not BodyKind.RAW:
            raise ValueError("multipart form bodies cannot also be JSON or URL-encoded")
        return self


class RedirectPolicy(BaseModel):
    """Static redirect configuration handed to the transport."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    follow: bool = Field(default=True, description="Follow redirects at all")
    max_redirects: int = Field(default=10, ge=0, description="Upper bound when following")


class RequestSpec(BaseModel):
    """Everything needed to assemble the single outgoing request.

    Headers, query params and cookies keep argument order. Duplicates are
    allowed and all of them are applied.
    """

    model_config = ConfigDict(extra="forbid")

    url: str = Field(description="Target URL as typed by the user")
    method: Method = Method.GET
    headers: list[str] = Field(default_factory=list, description="Raw NAME=VALUE headers")
    query_params: list[str] = Field(default_factory=list, description="Raw KEY=VALUE params")
    cookies: list[str] = Field(default_factory=list, description="Raw cookie strings")
    auth: AuthSpec | None = None
    body: BodySpec | None = None
    redirects: RedirectPolicy = Field(default_factory=RedirectPolicy)


# =============================================================================
# Body Content
# =============================================================================


class BodyContent:
    """Text or binary body content, convertible to either representation."""

    __slots__ = ("_text", "_data")

    def __init__(self, text: str | None = None, data: bytes | None = None) -> None:
        if (text is None) == (data is None):
            raise ValueError("BodyContent needs exactly one of text or data")
        self._text = text
        self._data = data

    @classmethod
    def from_text(cls, text: str) -> BodyContent:
        return cls(text=text)

    @classmethod
    def from_bytes(cls, data: bytes) -> BodyContent:
        return cls(data=data)

    @property
    def is_text(self) -> bool:
        return self._text is not None

    def as_bytes(self) -> bytes:
        if self._data is not None:
            return self._data
        return self._text.encode("utf-8")

    def as_text(self) -> str:
        """Return the content as text.

        Raises:
            UnicodeDecodeError: If binary content is not valid UTF-8.
        """
        if self._text is not None:
            return self._text
        return self._data.decode("utf-8")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BodyContent):
            return NotImplemented
        return self.as_bytes() == other.as_bytes()

    def __repr__(self) -> str:
        if self._text is not None:
            return f"BodyContent(text={self._text!r})"
        return f"BodyContent(<{len(self._data)} bytes>)"


# =============================================================================
# Response Models
# =============================================================================


class StatusClass(str, Enum):
    """Status code classes, used to pick the status line color."""

    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"

    @classmethod
    def of(cls, status_code: int) -> StatusClass:
        if 100 <= status_code < 200:
            return cls.INFORMATIONAL
        if 200 <= status_code < 300:
            return cls.SUCCESS
        if 300 <= status_code < 400:
            return cls.REDIRECTION
        if 400 <= status_code < 500:
            return cls.CLIENT_ERROR
        if 500 <= status_code < 600:
            return cls.SERVER_ERROR
        return cls.UNKNOWN


class ParsedResponse(BaseModel):
    """One HTTP response as returned by the transport.

    Headers keep declaration order and original casing.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    status_code: int = Field(description="HTTP status code")
    reason_phrase: str = Field(default="", description="Reason phrase, may be empty")
    http_version: str = Field(default="HTTP/1.1", description="Protocol version")
    headers: list[tuple[str, str]] = Field(default_factory=list)
    body: bytes = Field(default=b"", description="Raw body bytes")

    @property
    def status_class(self) -> StatusClass:
        return StatusClass.of(self.status_code)

    @property
    def is_json(self) -> bool:
        """True iff any content-type header mentions application/json."""
        return any(
            name.lower() == "content-type" and "application/json" in value
            for name, value in self.headers
        )


# =============================================================================
# Configuration Models
# =============================================================================


class ColorMode(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class ClientConfig(BaseModel):
    """Optional config file structure. Command-line flags take precedence."""

    model_config = ConfigDict(extra="forbid")

    headers: list[str] = Field(
        default_factory=list,
        description="NAME=VALUE headers sent before command-line headers (supports ${ENV_VAR})",
    )
    timeout: float | None = Field(default=None, gt=0, description="Request timeout in seconds")
    follow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=10, ge=0)
    print_headers: bool = Field(default=False)
    color: ColorMode = Field(default=ColorMode.AUTO)
    verify_ssl: bool = Field(default=True)
