"""Normalization helpers.

Centralizes defensive parsing of vendor values: numbers that arrive as
strings, vendor-local timestamps and the battery voltage scale.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, tzinfo
from typing import Any

from gpsbridge._constants import BATTERY_EMPTY_V, BATTERY_FULL_V, FRESHNESS_WINDOW_S

# Numeric prefix of strings like "12.4V".
_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def leading_float(value: Any) -> float | None:
    """Like :func:`safe_float` but also accept a number followed by a unit."""
    parsed = safe_float(value)
    if parsed is not None or not isinstance(value, str):
        return parsed
    match = _LEADING_NUMBER.match(value)
    return safe_float(match.group(1)) if match else None


def safe_bool(value: Any) -> bool | None:
    """Parse the vendor's boolean flags (``true``/``"1"``/``1``...)."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return None


def parse_position_time(timestamp: Any, *, tz: tzinfo | None = None) -> datetime | None:
    """Parse a vendor timestamp such as ``"2024-05-01 13:45:10"``.

    The date/time separator is normalized to ``T`` before ISO parsing.
    Naive results get *tz* attached when given. Returns ``None`` for
    anything that does not parse.
    """
    if not isinstance(timestamp, str):
        return None
    cleaned = timestamp.strip().replace(" ", "T", 1)
    if not cleaned:
        return None
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        return None
    if parsed.tzinfo is None and tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def is_fresh(timestamp: Any, now: datetime, *, tz: tzinfo | None = None) -> bool:
    """Whether *timestamp* is strictly within the 24 hours before *now*.

    Naive timestamps are read in *tz*, or in *now*'s zone when *tz* is
    ``None``. Unparsable timestamps are never fresh.
    """
    parsed = parse_position_time(timestamp, tz=tz or now.tzinfo)
    if parsed is None:
        return False
    if parsed.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()
    return parsed > now - timedelta(seconds=FRESHNESS_WINDOW_S)


def battery_percentage(voltage: Any) -> str:
    """Map a battery voltage to a ``"0"``..``"100"`` percentage string.

    The vehicles run different chemistries, so a single 11 V - 13 V
    window is used for all of them and the result is clamped. A trailing
    unit (``"12.4V"``) is ignored.
    """
    numeric = leading_float(voltage)
    if numeric is None:
        return "0"
    percentage = (numeric - BATTERY_EMPTY_V) / (BATTERY_FULL_V - BATTERY_EMPTY_V) * 100
    percentage = round(max(0.0, min(100.0, percentage)), 1)
    return format_state(percentage)


def format_state(value: Any) -> str:
    """Render a value the way the platform's string-typed states expect."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)
