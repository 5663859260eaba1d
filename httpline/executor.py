"""Executor - sends the request and captures the response.

Wraps one httpx.Client for the whole invocation. The client owns the cookie
jar and the redirect policy; exactly one request is sent through it.
"""

from __future__ import annotations

from typing import Any

import httpx

from httpline.errors import NetworkError
from httpline.models import ParsedResponse, RedirectPolicy


class Executor:
    """Executes a single request and converts the response.

    Usage:
        with Executor(RedirectPolicy(follow=True, max_redirects=10)) as executor:
            request = builder.build(spec, executor.client)
            response = executor.send(request)
    """

    def __init__(
        self,
        redirects: RedirectPolicy,
        timeout: float | None = None,
        verify_ssl: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            redirects: Follow redirects or not, and how many at most.
            timeout: Timeout in seconds. None keeps the httpx default.
            verify_ssl: Verify server certificates.
            transport: Transport override (tests use httpx.MockTransport).
        """
        self._redirects = redirects
        self._client = httpx.Client(
            **self._build_client_kwargs(redirects, timeout, verify_ssl, transport)
        )

    def __enter__(self) -> "Executor":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def client(self) -> httpx.Client:
        return self._client

    @staticmethod
    def _build_client_kwargs(
        redirects: RedirectPolicy,
        timeout: float | None,
        verify_ssl: bool,
        transport: httpx.BaseTransport | None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "follow_redirects": redirects.follow,
            "max_redirects": redirects.max_redirects,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        if not verify_ssl:
            kwargs["verify"] = False
        if transport is not None:
            kwargs["transport"] = transport
        return kwargs

    def send(self, request: httpx.Request) -> ParsedResponse:
        """Send the request, following redirects per the policy.

        Raises:
            NetworkError: If the request fails (connection, timeout, TLS,
                too many redirects, protocol violation).
        """
        try:
            response = self._client.send(request, follow_redirects=self._redirects.follow)
        except httpx.TooManyRedirects as e:
            raise NetworkError(
                f"Too many redirects (max {self._redirects.max_redirects}): {e}"
            ) from e
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timeout: {e}") from e
        except httpx.ConnectError as e:
            raise NetworkError(f"Connection error: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request error: {e}") from e

        return self._convert_response(response)

    @staticmethod
    def _convert_response(response: httpx.Response) -> ParsedResponse:
        """Convert httpx Response to ParsedResponse, keeping header order."""
        return ParsedResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            http_version=response.http_version,
            headers=list(response.headers.multi_items()),
            body=response.content,
        )
