"""Error taxonomy for httpline.

Every failure aborts the invocation. The CLI prints ``Error: <message>``
and exits non-zero; nothing is retried.
"""

from __future__ import annotations


class HttplineError(Exception):
    """Base class for all httpline errors."""


class InvalidUrlError(HttplineError):
    """Raised when the target URL cannot be parsed or has no usable scheme/host."""


class _RawValueError(HttplineError):
    """Error that names the original command-line string."""

    label = "value"

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f'Invalid {self.label}: "{raw}"')


class InvalidHeaderError(_RawValueError):
    label = "header"


class InvalidQueryParamError(_RawValueError):
    label = "query parameter"


class InvalidFormFieldError(_RawValueError):
    label = "form field"


class InvalidCookieError(_RawValueError):
    label = "cookie"


class InvalidJsonError(HttplineError):
    """Raised when JSON-flagged content does not parse."""

    def __init__(self, diagnostic: str) -> None:
        self.diagnostic = diagnostic
        super().__init__(f"Invalid JSON: {diagnostic}")


class InputError(HttplineError):
    """Raised when a body file, stdin, or the password prompt cannot be read."""


class NetworkError(HttplineError):
    """Raised when the transport fails (connection, timeout, TLS, redirects)."""


class DecodeError(HttplineError):
    """Raised when binary content is required as UTF-8 text and is not valid."""


class ConfigError(HttplineError):
    """Raised when configuration loading fails."""
