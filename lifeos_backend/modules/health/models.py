"""Health models for Life OS.

Habits and their daily logs, Garmin daily statistics, the computed daily
readiness and the free-form daily journal log.
"""

import enum
import uuid
import datetime

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import GUID
from ...database import Base, TimestampMixin, UserOwned


class HabitCategory(str, enum.Enum):
    MORNING = "morgen"
    EVENING = "abend"
    FITNESS = "fitness"
    NUTRITION = "ernährung"
    MINDSET = "mindset"
    SLEEP = "schlaf"
    PRODUCTIVITY = "produktivität"
    SOCIAL = "sozial"


class HabitFrequency(str, enum.Enum):
    DAILY = "täglich"
    WEEKLY = "wöchentlich"
    SPECIFIC_DAYS = "bestimmte_tage"


class HRVStatus(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class ReadinessLevel(str, enum.Enum):
    LOW = "niedrig"
    MODERATE = "moderat"
    HIGH = "hoch"
    OPTIMAL = "optimal"


class Habit(UserOwned, TimestampMixin, Base):
    """A recurring habit to track."""

    __tablename__ = "habits"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(40), nullable=True)
    frequency: Mapped[str | None] = mapped_column(
        String(40), nullable=True, default=HabitFrequency.DAILY.value
    )
    target_value: Mapped[float | None] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True
    )
    unit: Mapped[str | None] = mapped_column(String(40), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Habit(id={self.id}, name={self.name})>"


class HabitLog(UserOwned, TimestampMixin, Base):
    """Completion of a habit on one day."""

    __tablename__ = "habit_logs"

    habit_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("habits.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    value: Mapped[float | None] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_habit_logs_habit_date"),
    )

    def __repr__(self) -> str:
        return f"<HabitLog(habit_id={self.habit_id}, date={self.date}, is_completed={self.is_completed})>"


class GarminDailyStats(UserOwned, TimestampMixin, Base):
    """Daily wearable statistics imported by the Garmin sync workflow."""

    __tablename__ = "garmin_daily_stats"

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    sleep_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    body_battery_start: Mapped[int | None] = mapped_column(Integer, nullable=True)
    body_battery_end: Mapped[int | None] = mapped_column(Integer, nullable=True)
    body_battery_charged: Mapped[int | None] = mapped_column(Integer, nullable=True)
    stress_avg: Mapped[int | None] = mapped_column(Integer, nullable=True)
    steps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    active_calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    resting_hr: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hrv_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    hrv_value: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_garmin_daily_stats_user_date"),
    )


class DailyReadiness(UserOwned, TimestampMixin, Base):
    """Training readiness score for a day."""

    __tablename__ = "daily_readiness"

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    readiness_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    recommendation: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_readiness_user_date"),
    )


class DailyLog(UserOwned, TimestampMixin, Base):
    """Journal entry for a day, filled from the app and Telegram."""

    __tablename__ = "daily_logs"

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    mood: Mapped[int | None] = mapped_column(Integer, nullable=True)
    energy: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[float | None] = mapped_column(
        Numeric(5, 1, asdecimal=False), nullable=True
    )
    water_ml: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_logs_user_date"),
    )
