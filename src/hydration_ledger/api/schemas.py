"""Pydantic models for the HTTP API."""

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    daily_goal: int


class IntakeRequest(BaseModel):
    amount_ml: int


class GoalRequest(BaseModel):
    daily_goal: int


class EventsResponse(BaseModel):
    events: list[dict[str, object]]


class UserStatsResponse(BaseModel):
    account: str
    daily_goal: int
    today_intake: int
    total_intake: int
    streak_days: int
    progress_pct: int


class HistoryEntry(BaseModel):
    day_key: int
    amount_ml: int


class HistoryResponse(BaseModel):
    account: str
    history: list[HistoryEntry]


class GlobalStatsResponse(BaseModel):
    total_users: int
    total_water_logged: int
