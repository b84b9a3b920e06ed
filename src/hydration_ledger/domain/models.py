"""Domain models for the hydration ledger."""

from dataclasses import dataclass

MIN_DAILY_GOAL_ML = 500
MAX_DAILY_GOAL_ML = 10000
MAX_ENTRY_ML = 2000
MAX_HISTORY_DATES = 30


@dataclass(frozen=True)
class UserRecord:
    """Hydration state for a single account."""

    account: str
    daily_goal: int
    today_intake: int
    total_intake: int
    streak_days: int
    last_update_date: int
    is_registered: bool = True
    version: int = 0


@dataclass(frozen=True)
class GlobalStats:
    """Process-wide counters shared by all accounts."""

    total_users: int
    total_water_logged: int


@dataclass(frozen=True)
class UserStats:
    """Read-only projection of an account's progress."""

    daily_goal: int
    today_intake: int
    total_intake: int
    streak_days: int
    progress_pct: int
