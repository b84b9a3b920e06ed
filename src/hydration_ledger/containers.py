"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from hydration_ledger.adapters.memory_ledger_repository import (
    InMemoryLedgerRepository,
)
from hydration_ledger.adapters.supabase_ledger_repository import (
    SupabaseLedgerRepository,
)
from hydration_ledger.adapters.webhook_publisher import HttpxWebhookPublisher
from hydration_ledger.config import STORAGE_MEMORY, STORAGE_SUPABASE, Settings
from hydration_ledger.services.clock import Clock, SystemClock
from hydration_ledger.services.events import (
    EventLog,
    EventPublisher,
    LoggingEventPublisher,
)
from hydration_ledger.services.ledger import LedgerRepository, LedgerService
from hydration_ledger.services.queries import QueryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    repository: LedgerRepository
    event_log: EventLog
    event_publisher: EventPublisher
    ledger_service: LedgerService
    query_service: QueryService
    close_resources: Callable[[], Awaitable[None]]


def build_repository(settings: Settings) -> LedgerRepository:
    """Create the ledger repository for the configured storage backend."""
    if settings.storage_backend == STORAGE_MEMORY:
        return InMemoryLedgerRepository()
    if settings.storage_backend == STORAGE_SUPABASE:
        if not settings.supabase_url or not settings.supabase_service_key:
            raise RuntimeError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for supabase storage"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseLedgerRepository(client)
    raise RuntimeError(f"Unknown storage backend: {settings.storage_backend}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    clock = SystemClock(resolved_settings.timezone)
    repository = build_repository(resolved_settings)
    event_log = EventLog(max_size=resolved_settings.event_log_size)
    ledger_service = LedgerService(
        repository=repository, clock=clock, event_log=event_log
    )
    query_service = QueryService(repository=repository, clock=clock)

    webhook_publisher: HttpxWebhookPublisher | None = None
    event_publisher: EventPublisher
    if resolved_settings.event_webhook_url:
        webhook_publisher = HttpxWebhookPublisher.create(
            resolved_settings.event_webhook_url
        )
        event_publisher = webhook_publisher
    else:
        event_publisher = LoggingEventPublisher()

    async def close_resources() -> None:
        if webhook_publisher is not None:
            await webhook_publisher.close()

    return AppContainer(
        settings=resolved_settings,
        clock=clock,
        repository=repository,
        event_log=event_log,
        event_publisher=event_publisher,
        ledger_service=ledger_service,
        query_service=query_service,
        close_resources=close_resources,
    )
