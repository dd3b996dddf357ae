"""Productivity models for Life OS.

GTD inbox items, meetings with their extracted action items, goals on
year/quarter/month/week horizons, and property tickets.
"""

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import GUID
from ...database import Base, TimestampMixin, UserOwned


class InboxStatus(str, enum.Enum):
    INBOX = "inbox"
    TODAY = "today"
    NEXT = "next"
    SCHEDULED = "scheduled"
    SOMEDAY = "someday"
    WAITING = "waiting"
    DELEGATED = "delegated"
    DONE = "done"


CLOSED_INBOX_STATUSES = (InboxStatus.DONE.value, InboxStatus.DELEGATED.value)


class InboxSource(str, enum.Enum):
    MANUAL = "manual"
    EMAIL = "email"
    MS_TODO = "ms_todo"
    CALENDAR = "calendar"
    TELEGRAM = "telegram"
    MEETING = "meeting"
    TICKET = "ticket"


class Priority(int, enum.Enum):
    """Eisenhower quadrants."""

    URGENT_IMPORTANT = 1
    NOT_URGENT_IMPORTANT = 2
    URGENT_NOT_IMPORTANT = 3
    NOT_URGENT_NOT_IMPORTANT = 4


class ActionItemStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class GoalStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    DEFERRED = "deferred"


ACTIVE_GOAL_STATUSES = (GoalStatus.NOT_STARTED.value, GoalStatus.IN_PROGRESS.value)


class GoalTimeframe(str, enum.Enum):
    YEARLY = "yearly"
    QUARTERLY = "quarterly"
    MONTHLY = "monthly"
    WEEKLY = "weekly"


class GoalArea(str, enum.Enum):
    WEALTH = "wealth"
    HEALTH = "health"
    CAREER = "career"
    RELATIONSHIPS = "relationships"
    PERSONAL_GROWTH = "personal_growth"
    LIFESTYLE = "lifestyle"


class TicketStatus(str, enum.Enum):
    NEW = "neu"
    IN_PROGRESS = "in_bearbeitung"
    WAITING = "wartend"
    COMPLETED = "abgeschlossen"
    CANCELLED = "storniert"


CLOSED_TICKET_STATUSES = (TicketStatus.COMPLETED.value, TicketStatus.CANCELLED.value)


class TicketPriority(str, enum.Enum):
    LOW = "niedrig"
    MEDIUM = "mittel"
    HIGH = "hoch"
    URGENT = "dringend"


class InboxItem(UserOwned, TimestampMixin, Base):
    """A captured task or idea."""

    __tablename__ = "inbox_items"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InboxStatus.INBOX.value
    )
    priority: Mapped[int | None] = mapped_column(Integer, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    context: Mapped[str | None] = mapped_column(String(40), nullable=True)
    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InboxSource.MANUAL.value
    )
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )
    goal_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("goals.id", ondelete="SET NULL"), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (Index("ix_inbox_items_status_due", "status", "due_date"),)

    def __repr__(self) -> str:
        return f"<InboxItem(id={self.id}, title={self.title}, status={self.status})>"


class Meeting(UserOwned, TimestampMixin, Base):
    """A calendar meeting with optional minutes."""

    __tablename__ = "meetings"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    attendees: Mapped[list | None] = mapped_column(JSON, nullable=True)
    is_billable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    transcript: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InboxSource.MANUAL.value
    )
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Meeting(id={self.id}, title={self.title})>"


class MeetingActionItem(UserOwned, TimestampMixin, Base):
    """An action item extracted from a meeting, mirrored as an inbox item."""

    __tablename__ = "meeting_action_items"

    meeting_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False
    )
    inbox_item_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("inbox_items.id", ondelete="SET NULL"), nullable=True
    )
    extracted_text: Mapped[str] = mapped_column(Text, nullable=False)
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ActionItemStatus.PENDING.value
    )

    __table_args__ = (Index("ix_meeting_action_items_meeting", "meeting_id"),)


class Goal(UserOwned, TimestampMixin, Base):
    """A goal on one of the planning horizons."""

    __tablename__ = "goals"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    area: Mapped[str | None] = mapped_column(String(40), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GoalStatus.NOT_STARTED.value
    )
    timeframe: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    quarter: Mapped[int | None] = mapped_column(Integer, nullable=True)
    month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    target_value: Mapped[float | None] = mapped_column(
        Numeric(14, 2, asdecimal=False), nullable=True
    )
    unit: Mapped[str | None] = mapped_column(String(40), nullable=True)
    current_value: Mapped[float | None] = mapped_column(
        Numeric(14, 2, asdecimal=False), default=0
    )
    progress_percent: Mapped[float | None] = mapped_column(
        Numeric(5, 2, asdecimal=False), default=0
    )
    parent_goal_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("goals.id", ondelete="SET NULL"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Goal(id={self.id}, title={self.title}, timeframe={self.timeframe})>"


class Ticket(UserOwned, TimestampMixin, Base):
    """A maintenance or tenant request for a property."""

    __tablename__ = "tickets"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TicketStatus.NEW.value
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TicketPriority.MEDIUM.value
    )
    category: Mapped[str | None] = mapped_column(String(40), nullable=True)
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )
    unit_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("units.id", ondelete="SET NULL"), nullable=True
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, title={self.title}, status={self.status})>"
