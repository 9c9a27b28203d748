from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from gpsbridge.ingestion.normalize import (
    battery_percentage,
    format_state,
    is_fresh,
    parse_position_time,
    safe_bool,
    safe_float,
)

_NOW = datetime(2026, 3, 14, 12, 0, 0, tzinfo=UTC)


def _vendor_time(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S")


@pytest.mark.parametrize(
    ("voltage", "expected"),
    [
        ("11.0", "0"),
        ("13.0", "100"),
        ("12.0", "50"),
        ("abc", "0"),
        ("14.0", "100"),
        ("9.5", "0"),
        ("12.35", "67.5"),
        ("12.4", "70"),
        ("12.4V", "70"),
        (" 12.6 V", "80"),
        ("V12", "0"),
        ("", "0"),
        (None, "0"),
    ],
)
def test_battery_percentage(voltage: str | None, expected: str) -> None:
    assert battery_percentage(voltage) == expected


def test_fresh_one_hour_ago() -> None:
    assert is_fresh(_vendor_time(_NOW - timedelta(hours=1)), _NOW) is True


def test_stale_twenty_five_hours_ago() -> None:
    assert is_fresh(_vendor_time(_NOW - timedelta(hours=25)), _NOW) is False


def test_exactly_twenty_four_hours_is_not_fresh() -> None:
    assert is_fresh(_vendor_time(_NOW - timedelta(hours=24)), _NOW) is False


@pytest.mark.parametrize("timestamp", ["garbage", "", "2026-13-45 99:00:00", None, 1771000000])
def test_unparsable_timestamps_are_not_fresh(timestamp: object) -> None:
    assert is_fresh(timestamp, _NOW) is False


def test_naive_timestamp_uses_given_zone() -> None:
    plus_two = timezone(timedelta(hours=2))
    # 13:30 at UTC+2 is 11:30 UTC, half an hour before _NOW.
    assert is_fresh("2026-03-14 13:30:00", _NOW, tz=plus_two) is True
    assert is_fresh("2026-03-13 14:30:00", _NOW, tz=plus_two) is True
    # 11:30 UTC the day before; read as UTC it would still have been fresh.
    assert is_fresh("2026-03-13 13:30:00", _NOW, tz=plus_two) is False
    assert is_fresh("2026-03-13 13:30:00", _NOW) is True


def test_parse_position_time_normalizes_separator() -> None:
    parsed = parse_position_time("2026-03-14 10:15:00", tz=UTC)
    assert parsed == datetime(2026, 3, 14, 10, 15, tzinfo=UTC)


def test_safe_helpers() -> None:
    assert safe_float("12.5") == 12.5
    assert safe_float("--") is None
    assert safe_float("nan") is None
    assert safe_bool("1") is True
    assert safe_bool("false") is False
    assert safe_bool("maybe") is None


def test_format_state() -> None:
    assert format_state(5.0) == "5"
    assert format_state(5.25) == "5.25"
    assert format_state(True) == "true"
    assert format_state(None) == ""
    assert format_state(7) == "7"
