"""Event recording and delivery."""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Protocol

from hydration_ledger.domain.events import LedgerEvent

_logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    """Interface for delivering ledger events to observers."""

    async def publish(self, events: list[LedgerEvent]) -> None:
        """Deliver events in order."""


@dataclass
class EventLog:
    """Bounded in-memory log of recent ledger events."""

    max_size: int = 200
    _events: deque[LedgerEvent] = field(init=False)
    _lock: threading.Lock = field(init=False, default_factory=threading.Lock)

    def __post_init__(self) -> None:
        self._events = deque(maxlen=self.max_size)

    def record(self, events: list[LedgerEvent]) -> None:
        """Append events to the log."""
        with self._lock:
            self._events.extend(events)

    def recent(self, limit: int = 50) -> list[LedgerEvent]:
        """Return up to `limit` most recent events, oldest first."""
        with self._lock:
            events = list(self._events)
        if limit <= 0:
            return []
        return events[-limit:]


@dataclass
class LoggingEventPublisher(EventPublisher):
    """Publisher that writes events to the application log."""

    async def publish(self, events: list[LedgerEvent]) -> None:
        """Log each event payload."""
        for event in events:
            _logger.info("Ledger event: %s", event.as_payload())
