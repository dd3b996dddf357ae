"""Fitness models for Life OS.

The supplement protocol checklist and the free substance log, strength
training sessions with their sets, good and bad fitness habits, and daily
body measurements.
"""

import datetime
import enum
import uuid

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import GUID
from ...database import Base, TimestampMixin, UserOwned


class SubstanceType(str, enum.Enum):
    SUPPLEMENT = "supplement"
    PEPTIDE = "peptide"
    MEDICATION = "medication"


class FitnessHabitType(str, enum.Enum):
    GOOD = "good"
    BAD = "bad"


class DailySupplementTracking(UserOwned, TimestampMixin, Base):
    """Intake of one protocol supplement in one time slot of a day."""

    __tablename__ = "daily_supplement_tracking"

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    slot_name: Mapped[str] = mapped_column(String(40), nullable=False)
    supplement_name: Mapped[str] = mapped_column(String(120), nullable=False)
    taken: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "date",
            "slot_name",
            "supplement_name",
            name="uq_daily_supplement_tracking_entry",
        ),
    )

    def __repr__(self) -> str:
        return f"<DailySupplementTracking(date={self.date}, slot={self.slot_name}, supplement={self.supplement_name})>"


class SupplementPeptideLog(UserOwned, TimestampMixin, Base):
    """A substance taken outside the protocol, with dose and time."""

    __tablename__ = "supplement_peptide_log"

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    time: Mapped[datetime.time] = mapped_column(Time, nullable=False)
    substance_name: Mapped[str] = mapped_column(String(255), nullable=False)
    substance_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubstanceType.SUPPLEMENT.value
    )
    dose: Mapped[str] = mapped_column(String(100), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class TrainingSession(UserOwned, TimestampMixin, Base):
    """The strength training of a day."""

    __tablename__ = "training_sessions"

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    session_name: Mapped[str] = mapped_column(String(100), nullable=False, default="Tag 1")
    start_time: Mapped[datetime.time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[datetime.time | None] = mapped_column(Time, nullable=True)
    plan_followed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    deviation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    intensity_discipline: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_training_sessions_user_date"),
    )

    def __repr__(self) -> str:
        return f"<TrainingSession(id={self.id}, date={self.date}, name={self.session_name})>"


class TrainingSet(UserOwned, TimestampMixin, Base):
    """One set of an exercise within a training session."""

    __tablename__ = "training_sets"

    session_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("training_sessions.id", ondelete="CASCADE"), nullable=False
    )
    exercise_name: Mapped[str] = mapped_column(String(120), nullable=False)
    set_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    weight_kg: Mapped[float | None] = mapped_column(
        Numeric(6, 2, asdecimal=False), nullable=True
    )
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rpe: Mapped[float | None] = mapped_column(Numeric(3, 1, asdecimal=False), nullable=True)
    is_pr: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)


class FitnessHabit(UserOwned, TimestampMixin, Base):
    """A behaviour to build (good) or to avoid (bad)."""

    __tablename__ = "fitness_habits"

    habit_name: Mapped[str] = mapped_column(String(255), nullable=False)
    habit_type: Mapped[str] = mapped_column(String(10), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "habit_name", name="uq_fitness_habits_user_name"),
    )


class FitnessHabitLog(UserOwned, TimestampMixin, Base):
    """Whether a fitness habit happened on a day."""

    __tablename__ = "fitness_habit_logs"

    habit_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("fitness_habits.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_fitness_habit_logs_habit_date"),
    )


class BodyTracking(UserOwned, TimestampMixin, Base):
    """Morning body measurements of a day."""

    __tablename__ = "body_tracking"

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    weight_kg: Mapped[float | None] = mapped_column(
        Numeric(5, 1, asdecimal=False), nullable=True
    )
    waist_cm: Mapped[float | None] = mapped_column(
        Numeric(5, 1, asdecimal=False), nullable=True
    )
    blood_pressure_sys: Mapped[int | None] = mapped_column(Integer, nullable=True)
    blood_pressure_dia: Mapped[int | None] = mapped_column(Integer, nullable=True)
    resting_heart_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    body_battery: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_body_tracking_user_date"),
    )
