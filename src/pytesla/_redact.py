"""Helpers for safe debug logging.

pytesla handles account passwords, OAuth client secrets and bearer
tokens. This module redacts those fields before they reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "client_secret",
        "access_token",
        "refresh_token",
        "id_token",
        "token",
        "tokens",
        "authorization",
        "cookie",
        "backseat_token",
    }
)


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of a decoded JSON *value* with secrets masked.

    Values under a sensitive key become ``"<redacted>"``; strings longer
    than *max_string* are cut.
    """
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, Mapping):
        return {
            str(key): "<redacted>"
            if str(key).lower() in _SENSITIVE_VALUE_KEYS
            else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_for_log(item, max_string=max_string) for item in value]
    return value
