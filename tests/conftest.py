"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from hydration_ledger.adapters.memory_ledger_repository import (
    InMemoryLedgerRepository,
)
from hydration_ledger.config import Settings
from hydration_ledger.containers import AppContainer
from hydration_ledger.domain.events import LedgerEvent
from hydration_ledger.services.clock import Clock
from hydration_ledger.services.events import EventLog, EventPublisher
from hydration_ledger.services.ledger import LedgerService
from hydration_ledger.services.queries import QueryService

DAY0 = 20240228
DAY1 = 20240229
DAY2 = 20240301


@dataclass
class FixedClock(Clock):
    """Clock that returns a settable day key."""

    current: int = DAY0

    def today(self) -> int:
        return self.current


@dataclass
class RecordingEventPublisher(EventPublisher):
    """Publisher that keeps every published batch."""

    batches: list[list[LedgerEvent]] = field(default_factory=list)

    async def publish(self, events: list[LedgerEvent]) -> None:
        self.batches.append(list(events))


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": []}
    )
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(self, payload, on_conflict: str | None = None) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeRpcCall:
    result: object

    def execute(self) -> FakeResponse:
        return FakeResponse(data=self.result)  # type: ignore[arg-type]


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    rpc_results: dict[str, list[object]] = field(default_factory=dict)
    rpc_calls: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]

    def rpc(self, name: str, params: dict[str, object]) -> FakeRpcCall:
        self.rpc_calls.append((name, params))
        queued = self.rpc_results.get(name, [])
        return FakeRpcCall(result=queued.pop(0) if queued else True)


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_token="admin-token")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def repository() -> InMemoryLedgerRepository:
    return InMemoryLedgerRepository()


@pytest.fixture
def event_log() -> EventLog:
    return EventLog(max_size=50)


@pytest.fixture
def ledger(
    repository: InMemoryLedgerRepository, clock: FixedClock, event_log: EventLog
) -> LedgerService:
    return LedgerService(repository=repository, clock=clock, event_log=event_log)


@pytest.fixture
def queries(repository: InMemoryLedgerRepository, clock: FixedClock) -> QueryService:
    return QueryService(repository=repository, clock=clock)


@pytest.fixture
def publisher() -> RecordingEventPublisher:
    return RecordingEventPublisher()


@pytest.fixture
def container(
    settings: Settings,
    clock: FixedClock,
    repository: InMemoryLedgerRepository,
    event_log: EventLog,
    ledger: LedgerService,
    queries: QueryService,
    publisher: RecordingEventPublisher,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        clock=clock,
        repository=repository,
        event_log=event_log,
        event_publisher=publisher,
        ledger_service=ledger,
        query_service=queries,
        close_resources=close_resources,
    )
