"""URL assembly - parses the target URL and appends query parameters."""

from __future__ import annotations

import httpx

from httpline.errors import InvalidQueryParamError, InvalidUrlError
from httpline.pairs import split_pairs

SUPPORTED_SCHEMES = ("http", "https")


def parse_url(raw: str) -> httpx.URL:
    """Parse an absolute http(s) URL.

    Raises:
        InvalidUrlError: If the URL is malformed, relative, or has no host.
    """
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidUrlError(f"Invalid URL \"{raw}\": {e}") from e

    if not url.scheme:
        raise InvalidUrlError(f"Invalid URL \"{raw}\": missing scheme (e.g. https://)")
    if url.scheme not in SUPPORTED_SCHEMES:
        raise InvalidUrlError(
            f"Invalid URL \"{raw}\": unsupported scheme '{url.scheme}'"
        )
    if not url.host:
        raise InvalidUrlError(f"Invalid URL \"{raw}\": missing host")
    return url


def assemble_url(raw: str, query_params: list[str]) -> httpx.URL:
    """Parse raw and append KEY=VALUE query params in the order given.

    Params already present in the URL are kept. Duplicate keys are appended,
    never merged.

    Raises:
        InvalidUrlError: If the URL cannot be parsed.
        InvalidQueryParamError: If a query param has no '='.
    """
    url = parse_url(raw)
    for key, value in split_pairs(query_params, InvalidQueryParamError):
        url = url.copy_add_param(key, value)
    return url
