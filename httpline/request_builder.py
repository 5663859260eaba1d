"""Request builder - composes the single outgoing request.

Applied in a fixed order: headers, cookie jar, Authorization, the
content-type implied by the body kind, then the body itself. The redirect
policy is static client configuration (see executor.py).
"""

from __future__ import annotations

import httpx

from httpline.auth import PasswordPrompter, resolve_auth, terminal_prompter
from httpline.body import AssembledBody, StdinReader, assemble_body
from httpline.errors import InvalidCookieError, InvalidHeaderError, NetworkError
from httpline.models import RequestSpec
from httpline.pairs import split_pairs
from httpline.url_assembler import assemble_url


def _encoding_error(e: UnicodeEncodeError) -> NetworkError:
    return NetworkError(
        f"Encoding error: non-ASCII character {e.object[e.start:e.end]!r} "
        f"in a header name or value. HTTP requires ASCII there."
    )


def _check_cookie(raw: str) -> None:
    # Set-Cookie parsing ignores malformed strings, so reject them up front.
    name_value = raw.split(";", 1)[0]
    if "=" not in name_value:
        raise InvalidCookieError(raw)


def populate_cookies(jar: httpx.Cookies, cookies: list[str], url: httpx.URL) -> None:
    """Add cookie strings to jar as if url had answered with Set-Cookie.

    Attributes such as Path and Domain are honored. Without a Domain the
    cookie is only sent back to url's host.

    Raises:
        InvalidCookieError: If a cookie string has no NAME=VALUE part.
    """
    if not cookies:
        return
    for raw in cookies:
        _check_cookie(raw)
    origin = httpx.Request("GET", url)
    response = httpx.Response(
        200,
        headers=[("set-cookie", raw) for raw in cookies],
        request=origin,
    )
    jar.extract_cookies(response)


class RequestBuilder:
    """Builds an httpx.Request from a RequestSpec.

    Usage:
        builder = RequestBuilder(prompter=terminal_prompter)
        with Executor(spec.redirects) as executor:
            request = builder.build(spec, executor.client)
            response = executor.send(request)
    """

    def __init__(
        self,
        prompter: PasswordPrompter = terminal_prompter,
        stdin: StdinReader | None = None,
        default_headers: list[str] | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            prompter: Reads a password when basic auth has none.
            stdin: Shared stdin reader for '-' bodies.
            default_headers: NAME=VALUE headers applied before the RequestSpec headers.
        """
        self._prompter = prompter
        self._stdin = stdin or StdinReader()
        self._default_headers = default_headers or []

    def build(self, spec: RequestSpec, client: httpx.Client) -> httpx.Request:
        """Build the request. Nothing is sent.

        The body is assembled (and validated) before any password prompt,
        so a malformed body fails without asking for credentials.

        Raises:
            InvalidUrlError, InvalidQueryParamError, InvalidHeaderError,
            InvalidCookieError, InvalidFormFieldError, InvalidJsonError,
            DecodeError, InputError.
            NetworkError: If a header or cookie is not ASCII.
        """
        url = assemble_url(spec.url, spec.query_params)
        headers = split_pairs(self._default_headers + spec.headers, InvalidHeaderError)
        body = assemble_body(spec.body, self._stdin)

        try:
            populate_cookies(client.cookies, spec.cookies, url)
        except UnicodeEncodeError as e:
            raise _encoding_error(e) from e

        if spec.auth is not None:
            headers.append(("Authorization", resolve_auth(spec.auth, self._prompter)))

        if body.content_type is not None:
            headers.append(("Content-Type", body.content_type))

        try:
            return client.build_request(
                spec.method.value,
                url,
                headers=headers,
                **self._body_kwargs(body),
            )
        except UnicodeEncodeError as e:
            raise _encoding_error(e) from e

    @staticmethod
    def _body_kwargs(body: AssembledBody) -> dict:
        if body.is_form:
            # A None filename makes each part a plain text field.
            return {"files": [(name, (None, value)) for name, value in body.form_fields]}
        if body.content is not None:
            return {"content": body.content.as_bytes()}
        return {}
