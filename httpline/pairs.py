"""NAME=VALUE parsing shared by headers, query params and form fields."""

from __future__ import annotations

from httpline.errors import HttplineError


def split_pair(raw: str, error_cls: type[HttplineError]) -> tuple[str, str]:
    """Split on the first '='. The value may itself contain '='.

    Raises:
        error_cls: If raw has no '='. The error carries the original string.
    """
    name, sep, value = raw.partition("=")
    if not sep:
        raise error_cls(raw)
    return name, value


def split_pairs(raws: list[str], error_cls: type[HttplineError]) -> list[tuple[str, str]]:
    """Split every string in order, failing on the first malformed one."""
    return [split_pair(raw, error_cls) for raw in raws]
