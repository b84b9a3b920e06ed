"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from hydration_ledger.api.admin import router as admin_router
from hydration_ledger.api.schemas import (
    EventsResponse,
    GlobalStatsResponse,
    GoalRequest,
    HistoryEntry,
    HistoryResponse,
    IntakeRequest,
    RegisterRequest,
    UserStatsResponse,
)
from hydration_ledger.app_logging import configure_logging
from hydration_ledger.containers import AppContainer
from hydration_ledger.domain.errors import (
    AlreadyRegistered,
    InvalidAmount,
    InvalidGoal,
    LedgerError,
    NotRegistered,
    TooManyDates,
)
from hydration_ledger.domain.events import LedgerEvent

_ERROR_STATUS: dict[type[LedgerError], int] = {
    InvalidGoal: status.HTTP_400_BAD_REQUEST,
    InvalidAmount: status.HTTP_400_BAD_REQUEST,
    TooManyDates: status.HTTP_400_BAD_REQUEST,
    NotRegistered: status.HTTP_404_NOT_FOUND,
    AlreadyRegistered: status.HTTP_409_CONFLICT,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Hydration ledger starting (storage=%s, timezone=%s)",
            container.settings.storage_backend,
            container.settings.timezone,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(_request: Request, exc: LedgerError) -> JSONResponse:
        return JSONResponse(
            status_code=_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST),
            content={"error": exc.kind, "detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post(
        "/accounts/{account}/register", status_code=status.HTTP_201_CREATED
    )
    async def register(
        account: str, body: RegisterRequest, request: Request
    ) -> EventsResponse:
        """Register an account with a daily goal."""
        state_container: AppContainer = request.app.state.container
        events = state_container.ledger_service.register(account, body.daily_goal)
        return await _publish(state_container, events)

    @app.post("/accounts/{account}/intake")
    async def log_intake(
        account: str, body: IntakeRequest, request: Request
    ) -> EventsResponse:
        """Log a water intake entry."""
        state_container: AppContainer = request.app.state.container
        events = state_container.ledger_service.log_intake(account, body.amount_ml)
        return await _publish(state_container, events)

    @app.put("/accounts/{account}/goal")
    async def update_goal(
        account: str, body: GoalRequest, request: Request
    ) -> EventsResponse:
        """Change an account's daily goal."""
        state_container: AppContainer = request.app.state.container
        events = state_container.ledger_service.update_goal(account, body.daily_goal)
        return await _publish(state_container, events)

    @app.get("/accounts/{account}/stats")
    async def user_stats(account: str, request: Request) -> UserStatsResponse:
        """Return today's progress and lifetime totals."""
        state_container: AppContainer = request.app.state.container
        stats = state_container.query_service.get_user_stats(account)
        return UserStatsResponse(
            account=account,
            daily_goal=stats.daily_goal,
            today_intake=stats.today_intake,
            total_intake=stats.total_intake,
            streak_days=stats.streak_days,
            progress_pct=stats.progress_pct,
        )

    @app.get("/accounts/{account}/history")
    async def history(
        account: str, request: Request, day: list[int] = Query(default=[])
    ) -> HistoryResponse:
        """Return intake for the requested day keys."""
        state_container: AppContainer = request.app.state.container
        amounts = state_container.query_service.get_historical_intake(account, day)
        return HistoryResponse(
            account=account,
            history=[
                HistoryEntry(day_key=key, amount_ml=amount)
                for key, amount in zip(day, amounts, strict=True)
            ],
        )

    @app.get("/accounts/{account}/history/recent")
    async def recent_history(
        account: str, request: Request, days: int = 7
    ) -> HistoryResponse:
        """Return intake for the last `days` calendar days."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.query_service.get_recent_intake(account, days)
        return HistoryResponse(
            account=account,
            history=[
                HistoryEntry(day_key=key, amount_ml=amount) for key, amount in entries
            ],
        )

    @app.get("/stats")
    async def global_stats(request: Request) -> GlobalStatsResponse:
        """Return global counters."""
        state_container: AppContainer = request.app.state.container
        stats = state_container.query_service.get_global_stats()
        return GlobalStatsResponse(
            total_users=stats.total_users,
            total_water_logged=stats.total_water_logged,
        )

    return app


async def _publish(
    container: AppContainer, events: list[LedgerEvent]
) -> EventsResponse:
    await container.event_publisher.publish(events)
    return EventsResponse(events=[event.as_payload() for event in events])
