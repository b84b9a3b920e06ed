"""Read-only projections over the ledger."""

from dataclasses import dataclass

from hydration_ledger.domain.errors import NotRegistered, TooManyDates
from hydration_ledger.domain.models import (
    MAX_HISTORY_DATES,
    GlobalStats,
    UserRecord,
    UserStats,
)
from hydration_ledger.services.clock import Clock, day_keys_ending
from hydration_ledger.services.ledger import LedgerRepository


@dataclass
class QueryService:
    """Service for progress, history and aggregate views."""

    repository: LedgerRepository
    clock: Clock

    def get_user_stats(self, account: str) -> UserStats:
        """Return current-day progress and lifetime totals for an account."""
        user = self._require_user(account)
        return UserStats(
            daily_goal=user.daily_goal,
            today_intake=user.today_intake,
            total_intake=user.total_intake,
            streak_days=user.streak_days,
            progress_pct=min(100, user.today_intake * 100 // user.daily_goal),
        )

    def get_historical_intake(self, account: str, day_keys: list[int]) -> list[int]:
        """Return intake for each requested day key; unseen days yield 0."""
        self._require_user(account)
        if len(day_keys) > MAX_HISTORY_DATES:
            raise TooManyDates(
                f"At most {MAX_HISTORY_DATES} dates per query, got {len(day_keys)}"
            )
        return [self.repository.get_daily_intake(account, key) for key in day_keys]

    def get_recent_intake(self, account: str, days: int) -> list[tuple[int, int]]:
        """Return (day_key, amount) pairs for the last `days` days, oldest first."""
        self._require_user(account)
        if days > MAX_HISTORY_DATES:
            raise TooManyDates(f"At most {MAX_HISTORY_DATES} days per query, got {days}")
        keys = day_keys_ending(self.clock.today(), days) if days > 0 else []
        amounts = self.get_historical_intake(account, keys)
        return list(zip(keys, amounts, strict=True))

    def get_global_stats(self) -> GlobalStats:
        """Return process-wide counters."""
        return self.repository.get_global_stats()

    def _require_user(self, account: str) -> UserRecord:
        user = self.repository.get_user(account)
        if user is None or not user.is_registered:
            raise NotRegistered(f"Account {account} is not registered")
        return user
