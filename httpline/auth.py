"""Authorization header resolution.

Shorthand values pass through unchanged. Basic credentials are encoded as
``Basic base64(user:password)``, prompting for the password when the user
argument had none. The resolved value is only ever handed to the request
builder; it is never printed.
"""

from __future__ import annotations

import base64
import getpass
import warnings
from typing import Protocol

from httpline.errors import InputError
from httpline.models import AuthSpec, ShorthandAuth


class PasswordPrompter(Protocol):
    """Capability to read a password from the user without echoing it."""

    def __call__(self, prompt: str) -> str: ...


def terminal_prompter(prompt: str) -> str:
    """Read a password from the controlling terminal.

    getpass falls back to reading stdin (with a GetPassWarning) when there is
    no terminal. That fallback would echo the password, so it is an error here.

    Raises:
        InputError: If there is no terminal or reading fails.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", getpass.GetPassWarning)
            return getpass.getpass(prompt)
    except getpass.GetPassWarning as e:
        raise InputError("Cannot prompt for password: no interactive terminal") from e
    except (EOFError, OSError) as e:
        raise InputError(f"Cannot read password: {str(e) or 'end of input'}") from e


def encode_basic(username: str, password: str) -> str:
    """Standard (not URL-safe) Base64 with padding."""
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def resolve_auth(auth: AuthSpec, prompter: PasswordPrompter = terminal_prompter) -> str:
    """Compute the Authorization header value.

    Raises:
        InputError: If a password prompt was needed and failed.
    """
    if isinstance(auth, ShorthandAuth):
        return auth.value

    password = auth.password
    if password is None:
        password = prompter(f"Enter password for {auth.username}: ")
    return encode_basic(auth.username, password)

