"""Notifications emitted by ledger operations."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class UserRegistered:
    """An account registered with a daily goal."""

    account: str
    daily_goal: int

    name = "UserRegistered"

    def as_payload(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class WaterLogged:
    """An intake entry was applied."""

    account: str
    amount: int
    total_today: int

    name = "WaterLogged"

    def as_payload(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class GoalAchieved:
    """The goal was met for a day and the streak advanced."""

    account: str
    day_key: int
    streak: int

    name = "GoalAchieved"

    def as_payload(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class GoalUpdated:
    """An account changed its daily goal."""

    account: str
    new_goal: int

    name = "GoalUpdated"

    def as_payload(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class StreakBroken:
    """A running streak was reset at rollover."""

    account: str
    previous_streak: int

    name = "StreakBroken"

    def as_payload(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""
        return {"event": self.name, **asdict(self)}


LedgerEvent = UserRegistered | WaterLogged | GoalAchieved | GoalUpdated | StreakBroken
