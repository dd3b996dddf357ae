"""Productivity Pydantic schemas.

Request schemas carry the form rules: titles are trimmed and required, blank
optional strings become ``None``, goal dates must be ordered and targets
positive.
"""

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from ...core.utils import ensure_utc, sanitize_string
from .models import (
    ActionItemStatus,
    GoalArea,
    GoalStatus,
    GoalTimeframe,
    InboxSource,
    InboxStatus,
    TicketPriority,
    TicketStatus,
)


def _required_title(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("Title is required")
    if isinstance(value, str):
        return value.strip()
    return value


def _goal_title(value: Any) -> Any:
    title = _required_title(value)
    if isinstance(title, str) and len(title) < 3:
        raise ValueError("Title must be at least 3 characters")
    return title


def _positive_target(value: float | None) -> float | None:
    if value is not None and value <= 0:
        raise ValueError("Target value must be a positive number")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_string(value, max_length=len(value))
    return value


# ----- Inbox Items -----


class InboxItemBase(BaseModel):
    title: str = Field(..., max_length=500)
    description: str | None = None
    status: InboxStatus = InboxStatus.INBOX
    priority: int | None = Field(1, ge=1, le=4)
    due_date: date | None = None
    scheduled_date: date | None = None
    context: str | None = Field(None, max_length=40)
    source: InboxSource = InboxSource.MANUAL
    property_id: UUID | None = None
    goal_id: UUID | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _required_title(v)

    @field_validator("description", "context", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)


class InboxItemCreate(InboxItemBase):
    pass


class InboxItemUpdate(BaseModel):
    title: str | None = Field(None, max_length=500)
    description: str | None = None
    status: InboxStatus | None = None
    priority: int | None = Field(None, ge=1, le=4)
    due_date: date | None = None
    scheduled_date: date | None = None
    context: str | None = Field(None, max_length=40)
    property_id: UUID | None = None
    goal_id: UUID | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _required_title(v)

    @field_validator("description", "context", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)


class InboxItemResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    status: str
    priority: int | None = None
    due_date: date | None = None
    scheduled_date: date | None = None
    context: str | None = None
    source: str
    property_id: UUID | None = None
    goal_id: UUID | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


# ----- Meetings -----


class Attendee(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(None, max_length=255)
    response_status: str | None = None


class MeetingBase(BaseModel):
    title: str = Field(..., max_length=500)
    start_time: datetime
    end_time: datetime | None = None
    location: str | None = Field(None, max_length=255)
    attendees: list[Attendee] | None = None
    is_billable: bool = False
    property_id: UUID | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _required_title(v)

    @field_validator("location", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)

    @field_validator("attendees")
    @classmethod
    def empty_attendees_as_none(cls, v):
        return v or None

    @field_validator("end_time")
    @classmethod
    def end_time_after_start(cls, v, info):
        start = info.data.get("start_time")
        if v is not None and start is not None and ensure_utc(v) < ensure_utc(start):
            raise ValueError("End time must not precede start time")
        return v


class MeetingCreate(MeetingBase):
    source: InboxSource = InboxSource.MANUAL

    @property
    def duration_minutes(self) -> int | None:
        return meeting_duration(self.start_time, self.end_time)


class MeetingUpdate(BaseModel):
    title: str | None = Field(None, max_length=500)
    start_time: datetime | None = None
    end_time: datetime | None = None
    location: str | None = Field(None, max_length=255)
    attendees: list[Attendee] | None = None
    is_billable: bool | None = None
    property_id: UUID | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _required_title(v)

    @field_validator("location", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)


class MeetingMinutesUpdate(BaseModel):
    transcript: str | None = None
    summary: str | None = None

    @field_validator("transcript", "summary", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)


class MeetingProcessRequest(BaseModel):
    """Optional transcript override; the stored transcript is used otherwise."""

    transcript: str | None = None


class MeetingResponse(BaseModel):
    id: UUID
    title: str
    start_time: datetime
    end_time: datetime | None = None
    duration_minutes: int | None = None
    location: str | None = None
    attendees: list[dict[str, Any]] | None = None
    is_billable: bool
    transcript: str | None = None
    summary: str | None = None
    source: str
    property_id: UUID | None = None

    class Config:
        from_attributes = True


class MeetingActionItemResponse(BaseModel):
    id: UUID
    meeting_id: UUID
    inbox_item_id: UUID | None = None
    extracted_text: str
    assigned_to: str | None = None
    due_date: date | None = None
    status: str

    class Config:
        from_attributes = True


class MeetingActionItemUpdate(BaseModel):
    status: ActionItemStatus


class MeetingProcessingResponse(BaseModel):
    meeting: MeetingResponse
    action_items: list[MeetingActionItemResponse]


def meeting_duration(start: datetime | None, end: datetime | None) -> int | None:
    """Whole minutes between start and end, rounded."""
    if start is None or end is None:
        return None
    return round((ensure_utc(end) - ensure_utc(start)).total_seconds() / 60)


# ----- Goals -----


class GoalBase(BaseModel):
    title: str = Field(..., max_length=255)
    description: str | None = None
    area: GoalArea | None = None
    status: GoalStatus = GoalStatus.NOT_STARTED
    start_date: date | None = None
    end_date: date | None = None
    target_value: float | None = None
    unit: str | None = Field(None, max_length=40)
    parent_goal_id: UUID | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_min_length(cls, v):
        return _goal_title(v)

    @field_validator("description", "unit", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)

    @field_validator("target_value")
    @classmethod
    def target_value_positive(cls, v):
        return _positive_target(v)

    @model_validator(mode="after")
    def end_date_not_before_start(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not precede start date")
        return self


class GoalCreate(GoalBase):
    timeframe: GoalTimeframe


class GoalUpdate(BaseModel):
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    area: GoalArea | None = None
    status: GoalStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    target_value: float | None = None
    unit: str | None = Field(None, max_length=40)
    current_value: float | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_min_length(cls, v):
        return _goal_title(v)

    @field_validator("description", "unit", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)

    @field_validator("target_value")
    @classmethod
    def target_value_positive(cls, v):
        return _positive_target(v)

    @model_validator(mode="after")
    def end_date_not_before_start(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not precede start date")
        return self


class GoalProgressUpdate(BaseModel):
    current_value: float = Field(..., ge=0)


class GoalResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    area: str | None = None
    status: str
    timeframe: str
    year: int | None = None
    quarter: int | None = None
    month: int | None = None
    week: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    target_value: float | None = None
    unit: str | None = None
    current_value: float | None = None
    progress_percent: float | None = None
    parent_goal_id: UUID | None = None

    class Config:
        from_attributes = True


# ----- Tickets -----


class TicketCreate(BaseModel):
    title: str = Field(..., max_length=500)
    description: str | None = None
    status: TicketStatus = TicketStatus.NEW
    priority: TicketPriority = TicketPriority.MEDIUM
    category: str | None = Field(None, max_length=40)
    property_id: UUID | None = None
    unit_id: UUID | None = None
    due_date: date | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _required_title(v)

    @field_validator("description", "category", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)


class TicketUpdate(BaseModel):
    title: str | None = Field(None, max_length=500)
    description: str | None = None
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    category: str | None = Field(None, max_length=40)
    due_date: date | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _required_title(v)

    @field_validator("description", "category", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _blank_to_none(v)


class TicketResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    status: str
    priority: str
    category: str | None = None
    property_id: UUID | None = None
    unit_id: UUID | None = None
    due_date: date | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
