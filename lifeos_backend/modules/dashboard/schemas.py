"""Pydantic schemas for the dashboard module."""

import datetime as dt
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from ..health.schemas import (
    DailyLogResponse,
    GarminStatsResponse,
    HabitToday,
    ReadinessResponse,
)
from ..productivity.schemas import InboxItemResponse, MeetingResponse


class InsightResponse(BaseModel):
    id: UUID
    type: str
    category: str | None = None
    priority: str
    title: str
    message: str
    suggested_actions: list[dict[str, Any]] | None = None
    related_entity_type: str | None = None
    related_entity_id: UUID | None = None
    is_read: bool
    is_actioned: bool
    action_taken: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class InsightActioned(BaseModel):
    action_taken: str | None = Field(None, max_length=2000)


class QuickStats(BaseModel):
    net_worth: float = 0
    total_assets: float = 0
    total_liabilities: float = 0
    cash_value: float = 0
    investment_value: float = 0
    property_value: float = 0
    inbox_count: int = 0
    overdue_count: int = 0
    open_tickets: int = 0
    active_goals: int = 0
    fire_progress: float = 0
    fire_target: float = 0


class TodayOverview(BaseModel):
    date: dt.date
    quick_stats: QuickStats
    garmin: GarminStatsResponse | None = None
    readiness: ReadinessResponse | None = None
    daily_log: DailyLogResponse | None = None
    habits: list[HabitToday]
    habits_completed: int
    meetings: list[MeetingResponse]
    tasks: list[InboxItemResponse]
    insights: list[InsightResponse]
    alerts: list[InsightResponse]
