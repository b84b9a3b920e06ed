"""Day-key clock used to bucket intake by calendar day."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Provider of the current calendar day as an integer key."""

    def today(self) -> int:
        """Return today's day key."""


def day_key(day: date) -> int:
    """Return the YYYYMMDD key for a date."""
    return day.year * 10000 + day.month * 100 + day.day


def date_from_key(key: int) -> date:
    """Return the date encoded by a YYYYMMDD key."""
    return date(key // 10000, key // 100 % 100, key % 100)


def day_keys_ending(last_key: int, days: int) -> list[int]:
    """Return keys for the `days` calendar days ending at `last_key`, oldest first."""
    last_day = date_from_key(last_key)
    return [
        day_key(last_day - timedelta(days=offset))
        for offset in range(days - 1, -1, -1)
    ]


@dataclass
class SystemClock:
    """Clock backed by wall time in a configured timezone.

    The timezone is resolved on construction, so an unknown name fails fast.
    """

    timezone_name: str = "UTC"
    _tz: ZoneInfo = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._tz = ZoneInfo(self.timezone_name)

    def today(self) -> int:
        """Return today's key in the configured timezone."""
        return day_key(datetime.now(tz=self._tz).date())
