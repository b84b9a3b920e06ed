"""Account ledger: registration, intake logging and streak transitions."""

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Protocol

from hydration_ledger.domain.errors import (
    AlreadyRegistered,
    InvalidAmount,
    InvalidGoal,
    NotRegistered,
)
from hydration_ledger.domain.events import (
    GoalAchieved,
    GoalUpdated,
    LedgerEvent,
    StreakBroken,
    UserRegistered,
    WaterLogged,
)
from hydration_ledger.domain.models import (
    MAX_DAILY_GOAL_ML,
    MAX_ENTRY_ML,
    MIN_DAILY_GOAL_ML,
    GlobalStats,
    UserRecord,
)
from hydration_ledger.services.clock import Clock
from hydration_ledger.services.events import EventLog

_logger = logging.getLogger(__name__)

MAX_WRITE_ATTEMPTS = 5


class LedgerRepository(Protocol):
    """Persistence interface for account records, daily history and counters.

    Each write method is one atomic unit: the record change, the history
    bucket and the global counter either all apply or none do. Record writes
    are conditional on `expected_version` and return False when another
    writer got there first.
    """

    def get_user(self, account: str) -> UserRecord | None:
        """Return the record for an account, if registered."""

    def create_user(self, record: UserRecord) -> bool:
        """Insert a record and count the user; False if the account exists."""

    def apply_intake(
        self, record: UserRecord, expected_version: int, day_key: int, amount: int
    ) -> bool:
        """Store the record, add `amount` to the day and the global total."""

    def update_goal(self, account: str, expected_version: int, daily_goal: int) -> bool:
        """Change an account's daily goal."""

    def get_daily_intake(self, account: str, day_key: int) -> int:
        """Return intake logged for an account on a day, 0 if none."""

    def get_global_stats(self) -> GlobalStats:
        """Return the global counters."""


@dataclass
class _AccountLocks:
    """One lock per registered account, created on first use."""

    _locks: dict[str, threading.Lock] = field(default_factory=dict)
    _guard: threading.Lock = field(default_factory=threading.Lock)

    def get(self, account: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(account, threading.Lock())


@dataclass
class LedgerService:
    """Applies state-mutating operations to account records.

    Calls for the same account are serialized in-process by the account's
    lock; across processes the repository's versioned writes detect a lost
    race, and the operation is recomputed from fresh state. Validation
    happens before any write, so a rejected call leaves no trace.
    """

    repository: LedgerRepository
    clock: Clock
    event_log: EventLog | None = None
    _account_locks: _AccountLocks = field(init=False, default_factory=_AccountLocks)
    _regression_warned: dict[str, int] = field(init=False, default_factory=dict)

    def register(self, account: str, daily_goal: int) -> list[LedgerEvent]:
        """Register an account with a daily goal in milliliters."""
        _validate_goal(daily_goal)
        record = UserRecord(
            account=account,
            daily_goal=daily_goal,
            today_intake=0,
            total_intake=0,
            streak_days=0,
            last_update_date=self.clock.today(),
        )
        if not self.repository.create_user(record):
            raise AlreadyRegistered(f"Account {account} is already registered")
        _logger.info("Registered account=%s goal=%s", account, daily_goal)
        return self._emit([UserRegistered(account=account, daily_goal=daily_goal)])

    def log_intake(self, account: str, amount: int) -> list[LedgerEvent]:
        """Log an intake entry, rolling the account over to a new day if needed."""
        self._require_user(account)
        if amount <= 0 or amount > MAX_ENTRY_ML:
            raise InvalidAmount(
                f"Amount must be between 1 and {MAX_ENTRY_ML} ml, got {amount}"
            )
        with self._account_locks.get(account):
            for _ in range(MAX_WRITE_ATTEMPTS):
                current = self._require_user(account)
                updated, events = self._next_intake_state(current, amount)
                if self.repository.apply_intake(
                    updated,
                    expected_version=current.version,
                    day_key=updated.last_update_date,
                    amount=amount,
                ):
                    return self._emit(events)
                _logger.info("Concurrent write on account=%s, retrying", account)
        raise RuntimeError(f"Could not log intake for {account}: too much contention")

    def update_goal(self, account: str, new_goal: int) -> list[LedgerEvent]:
        """Change an account's daily goal without touching intake or streak."""
        self._require_user(account)
        _validate_goal(new_goal)
        with self._account_locks.get(account):
            for _ in range(MAX_WRITE_ATTEMPTS):
                current = self._require_user(account)
                if self.repository.update_goal(
                    account, expected_version=current.version, daily_goal=new_goal
                ):
                    return self._emit([GoalUpdated(account=account, new_goal=new_goal)])
                _logger.info("Concurrent write on account=%s, retrying", account)
        raise RuntimeError(f"Could not update goal for {account}: too much contention")

    def _next_intake_state(
        self, user: UserRecord, amount: int
    ) -> tuple[UserRecord, list[LedgerEvent]]:
        events: list[LedgerEvent] = []
        today = self.clock.today()
        if today > user.last_update_date:
            user, events = _roll_over(user, today)
        elif today < user.last_update_date:
            self._warn_clock_regression(user, today)

        today_intake = user.today_intake + amount
        streak_days = user.streak_days
        if today_intake >= user.daily_goal and streak_days == 0:
            streak_days = 1
            events.append(
                GoalAchieved(account=user.account, day_key=user.last_update_date, streak=1)
            )
        events.append(
            WaterLogged(account=user.account, amount=amount, total_today=today_intake)
        )
        updated = replace(
            user,
            today_intake=today_intake,
            total_intake=user.total_intake + amount,
            streak_days=streak_days,
            version=user.version + 1,
        )
        return updated, events

    def _warn_clock_regression(self, user: UserRecord, today: int) -> None:
        if self._regression_warned.get(user.account) == today:
            return
        self._regression_warned[user.account] = today
        _logger.warning(
            "Clock regressed for account=%s: today=%s last_update=%s",
            user.account,
            today,
            user.last_update_date,
        )

    def _require_user(self, account: str) -> UserRecord:
        user = self.repository.get_user(account)
        if user is None or not user.is_registered:
            raise NotRegistered(f"Account {account} is not registered")
        return user

    def _emit(self, events: list[LedgerEvent]) -> list[LedgerEvent]:
        if self.event_log is not None:
            self.event_log.record(events)
        return events


def _validate_goal(goal: int) -> None:
    if goal < MIN_DAILY_GOAL_ML or goal > MAX_DAILY_GOAL_ML:
        raise InvalidGoal(
            f"Daily goal must be between {MIN_DAILY_GOAL_ML} and "
            f"{MAX_DAILY_GOAL_ML} ml, got {goal}"
        )


def _roll_over(user: UserRecord, today: int) -> tuple[UserRecord, list[LedgerEvent]]:
    """Close out the tracked day and move the account to `today`.

    Only the last tracked day is evaluated; days skipped between two logs are
    neither credited nor penalized.
    """
    events: list[LedgerEvent] = []
    streak_days = user.streak_days
    if user.today_intake >= user.daily_goal:
        streak_days += 1
        events.append(
            GoalAchieved(
                account=user.account, day_key=user.last_update_date, streak=streak_days
            )
        )
    elif streak_days > 0:
        events.append(StreakBroken(account=user.account, previous_streak=streak_days))
        streak_days = 0
    _logger.debug(
        "Rollover account=%s from=%s to=%s streak=%s",
        user.account,
        user.last_update_date,
        today,
        streak_days,
    )
    rolled = replace(
        user, today_intake=0, streak_days=streak_days, last_update_date=today
    )
    return rolled, events
