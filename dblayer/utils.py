"""Helpers for connection details."""

import re
from collections.abc import Mapping
from typing import Any

MASK = "#"

_URL_PASSWORD = re.compile(r"^(?P<head>[^:/?#]+://[^:@/]*:)(?P<password>.*)(?P<tail>@[^@]*)$")


def mask_connection(cn: Any) -> Any:
    """
    Copy of connection details safe for logging.

    The password of a connection string or mapping is replaced with
    the mask symbol repeated to its length. Other values are returned
    unchanged.
    """
    if isinstance(cn, str):
        match = _URL_PASSWORD.match(cn)
        if not match:
            return cn
        password = match.group("password")
        return f"{match.group('head')}{MASK * len(password)}{match.group('tail')}"

    if isinstance(cn, Mapping):
        safe = dict(cn)
        password = safe.get("password")
        if password:
            safe["password"] = MASK * len(str(password))
        return safe

    return cn


def is_connection_details(value: Any) -> bool:
    """Whether a value looks like connection details rather than options."""
    if isinstance(value, str):
        return "://" in value
    if isinstance(value, Mapping):
        return "host" in value or "database" in value
    return False
