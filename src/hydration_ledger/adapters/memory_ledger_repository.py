"""In-memory ledger repository."""

import threading
from dataclasses import dataclass, field, replace

from hydration_ledger.domain.models import GlobalStats, UserRecord
from hydration_ledger.services.ledger import LedgerRepository


@dataclass
class InMemoryLedgerRepository(LedgerRepository):
    """Process-local storage keyed by account and by (account, day_key).

    A single lock makes every write method one atomic unit.
    """

    users: dict[str, UserRecord] = field(default_factory=dict)
    history: dict[tuple[str, int], int] = field(default_factory=dict)
    stats: GlobalStats = field(
        default_factory=lambda: GlobalStats(total_users=0, total_water_logged=0)
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def get_user(self, account: str) -> UserRecord | None:
        """Return the record for an account, if registered."""
        return self.users.get(account)

    def create_user(self, record: UserRecord) -> bool:
        """Insert a record and count the user unless the account exists."""
        with self._lock:
            if record.account in self.users:
                return False
            self.users[record.account] = record
            self.stats = replace(self.stats, total_users=self.stats.total_users + 1)
            return True

    def apply_intake(
        self, record: UserRecord, expected_version: int, day_key: int, amount: int
    ) -> bool:
        """Store the record and add `amount` to the day and the global total."""
        with self._lock:
            current = self.users.get(record.account)
            if current is None or current.version != expected_version:
                return False
            self.users[record.account] = record
            key = (record.account, day_key)
            self.history[key] = self.history.get(key, 0) + amount
            self.stats = replace(
                self.stats, total_water_logged=self.stats.total_water_logged + amount
            )
            return True

    def update_goal(self, account: str, expected_version: int, daily_goal: int) -> bool:
        """Change the daily goal if the record is still at `expected_version`."""
        with self._lock:
            current = self.users.get(account)
            if current is None or current.version != expected_version:
                return False
            self.users[account] = replace(
                current, daily_goal=daily_goal, version=current.version + 1
            )
            return True

    def get_daily_intake(self, account: str, day_key: int) -> int:
        """Return intake for a day, 0 if none was logged."""
        return self.history.get((account, day_key), 0)

    def get_global_stats(self) -> GlobalStats:
        """Return the global counters."""
        return self.stats
