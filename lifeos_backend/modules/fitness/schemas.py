"""Pydantic schemas for the fitness module."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ...core.utils import sanitize_string
from .models import FitnessHabitType, SubstanceType


def _required_text(value, label: str):
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError(f"{label} is required")
    return value


def _optional_text(value, max_length: int = 10000):
    return sanitize_string(value, max_length=max_length) if isinstance(value, str) else value


# ----- Supplement protocol -----


class ProtocolSupplement(BaseModel):
    name: str
    dosage: str
    optional: bool = False


class SupplementSlot(BaseModel):
    """A time slot of the daily protocol and what is taken in it."""

    slot_name: str
    display_name: str
    supplements: list[ProtocolSupplement]


class SlotProgress(BaseModel):
    """Taken out of required supplements; optional ones never count."""

    completed: int = 0
    total: int = 0
    percent: int = 0


class ChecklistItem(ProtocolSupplement):
    taken: bool = False


class ChecklistSlot(BaseModel):
    slot_name: str
    display_name: str
    items: list[ChecklistItem]
    notes: str | None = None
    progress: SlotProgress


class SupplementChecklist(BaseModel):
    date: dt.date
    slots: list[ChecklistSlot]
    progress: SlotProgress


class SupplementIntake(BaseModel):
    slot_name: str
    supplement_name: str
    taken: bool
    date: dt.date | None = None


class SlotNotes(BaseModel):
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, v):
        return _optional_text(v)


# ----- Substance log -----


class SubstanceLogCreate(BaseModel):
    substance_name: str = Field(..., max_length=255)
    substance_type: SubstanceType = SubstanceType.SUPPLEMENT
    dose: str = Field(..., max_length=100)
    time: dt.time
    date: dt.date | None = None
    notes: str | None = None

    @field_validator("substance_name", mode="before")
    @classmethod
    def substance_name_required(cls, v):
        return _required_text(v, "Substance name")

    @field_validator("dose", mode="before")
    @classmethod
    def dose_required(cls, v):
        return _required_text(v, "Dose")

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, v):
        return _optional_text(v)


class SubstanceLogResponse(BaseModel):
    id: UUID
    date: dt.date
    time: dt.time
    substance_name: str
    substance_type: str
    dose: str
    notes: str | None = None

    class Config:
        from_attributes = True


# ----- Training -----


class TrainingSessionUpsert(BaseModel):
    session_name: str = Field("Tag 1", max_length=100)
    start_time: dt.time | None = None
    end_time: dt.time | None = None
    plan_followed: bool = True
    deviation_reason: str | None = None
    intensity_discipline: bool = True
    notes: str | None = None

    @field_validator("session_name", mode="before")
    @classmethod
    def session_name_required(cls, v):
        return _required_text(v, "Session name")

    @field_validator("deviation_reason", "notes", mode="before")
    @classmethod
    def blank_optional_strings(cls, v):
        return _optional_text(v)


class TrainingSessionResponse(BaseModel):
    id: UUID
    date: dt.date
    session_name: str
    start_time: dt.time | None = None
    end_time: dt.time | None = None
    plan_followed: bool
    deviation_reason: str | None = None
    intensity_discipline: bool
    notes: str | None = None

    class Config:
        from_attributes = True


class TrainingSetCreate(BaseModel):
    exercise_name: str = Field(..., max_length=120)
    set_number: int = Field(1, ge=1)
    weight_kg: float = Field(..., gt=0)
    reps: int = Field(..., gt=0)
    rpe: float | None = Field(None, ge=1, le=10)
    comment: str | None = None

    @field_validator("exercise_name", mode="before")
    @classmethod
    def exercise_name_required(cls, v):
        return _required_text(v, "Exercise name")

    @field_validator("comment", mode="before")
    @classmethod
    def blank_comment(cls, v):
        return _optional_text(v)


class TrainingSetResponse(BaseModel):
    id: UUID
    session_id: UUID
    exercise_name: str
    set_number: int
    weight_kg: float | None = None
    reps: int | None = None
    rpe: float | None = None
    is_pr: bool
    comment: str | None = None

    class Config:
        from_attributes = True


class ExerciseSets(BaseModel):
    exercise_name: str
    sets: list[TrainingSetResponse]


class TrainingDay(BaseModel):
    session: TrainingSessionResponse
    exercises: list[ExerciseSets]


class PersonalRecord(BaseModel):
    """Best set of an exercise by weight times reps."""

    exercise_name: str
    weight_kg: float
    reps: int
    score: float


# ----- Fitness habits -----


class FitnessHabitCreate(BaseModel):
    habit_name: str = Field(..., max_length=255)
    habit_type: FitnessHabitType
    description: str | None = None

    @field_validator("habit_name", mode="before")
    @classmethod
    def habit_name_required(cls, v):
        return _required_text(v, "Habit name")

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v):
        return _optional_text(v)


class FitnessHabitResponse(BaseModel):
    id: UUID
    habit_name: str
    habit_type: str
    description: str | None = None

    class Config:
        from_attributes = True


class FitnessHabitLogResponse(BaseModel):
    id: UUID
    habit_id: UUID
    date: dt.date
    completed: bool
    notes: str | None = None

    class Config:
        from_attributes = True


class FitnessHabitToggle(BaseModel):
    """Without ``completed`` the stored state is flipped."""

    completed: bool | None = None
    date: dt.date | None = None


class FitnessHabitStatus(FitnessHabitResponse):
    completed: bool = False


class FitnessHabitDay(BaseModel):
    date: dt.date
    good: list[FitnessHabitStatus]
    bad: list[FitnessHabitStatus]
    good_completed: int
    bad_completed: int


# ----- Body tracking -----


class BodyTrackingUpsert(BaseModel):
    weight_kg: float | None = Field(None, ge=20, le=300)
    waist_cm: float | None = Field(None, gt=0, le=300)
    blood_pressure_sys: int | None = Field(None, ge=50, le=260)
    blood_pressure_dia: int | None = Field(None, ge=30, le=160)
    resting_heart_rate: int | None = Field(None, ge=20, le=250)
    sleep_score: int | None = Field(None, ge=0, le=100)
    body_battery: int | None = Field(None, ge=0, le=100)
    notes: str | None = None

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, v):
        return _optional_text(v)


class BodyTrackingResponse(BaseModel):
    id: UUID
    date: dt.date
    weight_kg: float | None = None
    waist_cm: float | None = None
    blood_pressure_sys: int | None = None
    blood_pressure_dia: int | None = None
    resting_heart_rate: int | None = None
    sleep_score: int | None = None
    body_battery: int | None = None
    notes: str | None = None

    class Config:
        from_attributes = True


# ----- Weekly update -----


class WeeklyUpdate(BaseModel):
    """Monday to Sunday summary sent to the coach."""

    week_start: dt.date
    week_end: dt.date
    week_number: int
    year: int
    avg_weight_kg: float | None = None
    weight_change_kg: float | None = None
    training_sessions_completed: int = 0
    supplement_compliance_percent: float | None = None
    wellbeing_avg: float | None = None
    energy_avg: float | None = None
    sleep_avg_hours: float | None = None
    text: str = ""
