"""Pydantic schemas for the health module."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ...core.utils import sanitize_string
from .models import HabitCategory, HabitFrequency


class HabitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: HabitCategory | None = None
    frequency: HabitFrequency = HabitFrequency.DAILY
    target_value: float | None = Field(None, gt=0)
    unit: str | None = Field(None, max_length=40)
    sort_order: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Name is required")
        return v

    @field_validator("unit", mode="before")
    @classmethod
    def blank_unit(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v


class HabitUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    category: HabitCategory | None = None
    frequency: HabitFrequency | None = None
    target_value: float | None = Field(None, gt=0)
    unit: str | None = Field(None, max_length=40)
    sort_order: int | None = None
    is_active: bool | None = None


class HabitResponse(BaseModel):
    id: UUID
    name: str
    category: str | None = None
    frequency: str | None = None
    target_value: float | None = None
    unit: str | None = None
    sort_order: int
    is_active: bool

    class Config:
        from_attributes = True


class HabitLogResponse(BaseModel):
    id: UUID
    habit_id: UUID
    date: dt.date
    is_completed: bool
    value: float | None = None

    class Config:
        from_attributes = True


class HabitToday(HabitResponse):
    """A habit merged with its log for the day."""

    today_log: HabitLogResponse | None = None
    is_completed: bool = False


class HabitToggle(BaseModel):
    is_completed: bool
    value: float | None = None
    date: dt.date | None = None


class HabitStreak(BaseModel):
    habit_id: UUID
    current_streak: int
    last_completed: dt.date | None = None


class GarminStatsResponse(BaseModel):
    date: dt.date
    sleep_score: int | None = None
    sleep_duration_minutes: int | None = None
    body_battery_start: int | None = None
    body_battery_end: int | None = None
    body_battery_charged: int | None = None
    stress_avg: int | None = None
    steps: int | None = None
    active_calories: int | None = None
    resting_hr: int | None = None
    hrv_status: str | None = None
    hrv_value: int | None = None

    class Config:
        from_attributes = True


class ReadinessResponse(BaseModel):
    date: dt.date
    readiness_score: int | None = None
    level: str | None = None
    recommendation: str | None = None

    class Config:
        from_attributes = True


class DailyLogUpsert(BaseModel):
    mood: int | None = Field(None, ge=1, le=10)
    energy: int | None = Field(None, ge=1, le=10)
    weight: float | None = Field(None, ge=20, le=300)
    water_ml: int | None = Field(None, gt=0, le=10000)
    notes: str | None = None

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, v):
        return sanitize_string(v, max_length=10000) if isinstance(v, str) else v


class DailyLogResponse(BaseModel):
    id: UUID
    date: dt.date
    mood: int | None = None
    energy: int | None = None
    weight: float | None = None
    water_ml: int | None = None
    notes: str | None = None

    class Config:
        from_attributes = True
