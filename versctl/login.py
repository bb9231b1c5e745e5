"""Validating and reading the API key used to sign in."""

from __future__ import annotations

import getpass
import json
import urllib.error
import urllib.request
from collections.abc import Callable
from typing import Any
from urllib.parse import urlsplit, urlunsplit

VALIDATE_PATH = "/api/validate"


class LoginError(Exception):
    """Raised when an API key cannot be read or is rejected."""


def validation_endpoint(base_url: str) -> str:
    """Return the key validation URL under ``base_url``."""
    parts = urlsplit(base_url)
    path = parts.path.rstrip("/") + VALIDATE_PATH
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def _status_of(response: Any) -> int:
    status = getattr(response, "status", None)
    if status is None:
        status = response.getcode()
    return int(status)


def validate_api_key(
    api_key: str,
    base_url: str,
    opener: Callable[[urllib.request.Request], Any] | None = None,
) -> None:
    """Check ``api_key`` against the platform; raise LoginError if it is refused.

    ``opener`` sends the request and returns a response with a ``status``;
    it defaults to ``urllib.request.urlopen``.
    """
    send = opener or urllib.request.urlopen
    body = json.dumps({"api_key": api_key}).encode("utf-8")
    request = urllib.request.Request(
        validation_endpoint(base_url),
        data=body,
        method="POST",
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        },
    )
    try:
        response = send(request)
    except urllib.error.HTTPError as exc:
        status = exc.code
    except (urllib.error.URLError, OSError) as exc:
        raise LoginError(f"could not validate API key: {exc}") from exc
    else:
        try:
            status = _status_of(response)
        finally:
            close = getattr(response, "close", None)
            if callable(close):
                close()

    if status == 401:
        raise LoginError("invalid API key - please check your key and try again")
    if status != 200:
        raise LoginError(f"validation failed with status {status} - please try again")
    print("API key validated successfully")


def read_api_key(reader: Callable[[], str] | None = None) -> str:
    """Prompt for the API key without echoing it and return it stripped.

    ``reader`` returns the typed text; it defaults to a hidden terminal prompt.
    """
    print("Enter your API key (input will be hidden): ", end="", flush=True)
    read = reader or (lambda: getpass.getpass(""))
    try:
        text = read()
    except (EOFError, OSError) as exc:
        raise LoginError(f"error reading API key: {exc}") from exc
    print()
    api_key = text.strip()
    if not api_key:
        raise LoginError("API key cannot be empty")
    return api_key