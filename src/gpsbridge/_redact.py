"""Helpers for safe debug logging.

gpsbridge handles a vendor session token, the platform bearer token and
a geocoding API key. This module redacts those before they reach DEBUG
logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        "key",
        "key2018",
        "password",
        "pwd",
        "token",
    }
)

_REDACTED = "<redacted>"


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of *value* with secret-bearing keys masked.

    Covers what gets logged here: header and payload mappings, decoded
    vendor responses (nested mappings and lists) and plain scalars.
    Long strings are cut to *max_string* characters.
    """
    if isinstance(value, Mapping):
        return {
            str(key): _REDACTED if str(key).lower() in _SENSITIVE_VALUE_KEYS else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}...<truncated>"
    return value


def redact_url(url: str) -> str:
    """Strip the query string from *url* (it may carry an API key)."""
    head, sep, _ = url.partition("?")
    return f"{head}?<redacted>" if sep else head
