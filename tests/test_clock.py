"""Tests for day-key helpers."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfoNotFoundError

import pytest

from hydration_ledger.services.clock import (
    SystemClock,
    date_from_key,
    day_key,
    day_keys_ending,
)


def test_day_key_encodes_calendar_date() -> None:
    assert day_key(date(2024, 2, 29)) == 20240229
    assert date_from_key(20240229) == date(2024, 2, 29)


def test_day_keys_ending_crosses_month_and_year() -> None:
    assert day_keys_ending(20240301, 2) == [20240229, 20240301]
    assert day_keys_ending(20240101, 3) == [20231230, 20231231, 20240101]


def test_day_keys_strictly_increase() -> None:
    keys = day_keys_ending(20250105, 30)

    assert keys == sorted(set(keys))
    assert len(keys) == 30


def test_system_clock_uses_configured_timezone() -> None:
    before = day_key(datetime.now(tz=UTC).date())
    today = SystemClock("UTC").today()
    after = day_key(datetime.now(tz=UTC).date())

    assert today in {before, after}


def test_system_clock_rejects_unknown_timezone() -> None:
    with pytest.raises(ZoneInfoNotFoundError):
        SystemClock("Mars/Olympus_Mons")
