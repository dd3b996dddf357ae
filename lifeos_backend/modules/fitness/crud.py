"""CRUD operations for the fitness module."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import (
    BodyTracking,
    DailySupplementTracking,
    FitnessHabit,
    FitnessHabitLog,
    SupplementPeptideLog,
    TrainingSession,
    TrainingSet,
)


class SubstanceLogCRUD(BaseCRUD[SupplementPeptideLog, dict, dict]):
    default_order_by = "time"
    default_order_desc = False


class TrainingSessionCRUD(BaseCRUD[TrainingSession, dict, dict]):
    default_order_by = "date"


class TrainingSetCRUD(BaseCRUD[TrainingSet, dict, dict]):
    pass


class FitnessHabitCRUD(BaseCRUD[FitnessHabit, dict, dict]):
    search_fields = ["habit_name"]
    default_order_by = "habit_name"
    default_order_desc = False


substance_logs = SubstanceLogCRUD(SupplementPeptideLog)
training_sessions = TrainingSessionCRUD(TrainingSession)
training_sets = TrainingSetCRUD(TrainingSet)
fitness_habits = FitnessHabitCRUD(FitnessHabit)


async def get_for_date(
    db: AsyncSession, model: Any, user_id: UUID, day: date
) -> Any | None:
    """The row of a one-per-day table (session, body tracking) for a date."""
    query = select(model).where(and_(model.user_id == user_id, model.date == day))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_rows_between(
    db: AsyncSession, model: Any, user_id: UUID, start: date, end: date
) -> list[Any]:
    """Rows of a dated table with ``start <= date <= end``, oldest first."""
    query = (
        select(model)
        .where(
            and_(
                model.user_id == user_id,
                model.date >= start,
                model.date <= end,
            )
        )
        .order_by(model.date)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_supplement_entries(
    db: AsyncSession, user_id: UUID, day: date, slot_name: str | None = None
) -> list[DailySupplementTracking]:
    query = select(DailySupplementTracking).where(
        and_(
            DailySupplementTracking.user_id == user_id,
            DailySupplementTracking.date == day,
        )
    )
    if slot_name is not None:
        query = query.where(DailySupplementTracking.slot_name == slot_name)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_sets_for_session(
    db: AsyncSession, user_id: UUID, session_id: UUID
) -> list[TrainingSet]:
    query = (
        select(TrainingSet)
        .where(
            and_(
                TrainingSet.user_id == user_id,
                TrainingSet.session_id == session_id,
            )
        )
        .order_by(TrainingSet.exercise_name, TrainingSet.set_number)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_scored_sets(
    db: AsyncSession, user_id: UUID, exercise_name: str | None = None
) -> list[TrainingSet]:
    """Sets with both weight and reps, the ones that can set a record."""
    query = select(TrainingSet).where(
        and_(
            TrainingSet.user_id == user_id,
            TrainingSet.weight_kg.is_not(None),
            TrainingSet.reps.is_not(None),
        )
    )
    if exercise_name is not None:
        query = query.where(TrainingSet.exercise_name == exercise_name)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_fitness_habit_by_name(
    db: AsyncSession, user_id: UUID, habit_name: str
) -> FitnessHabit | None:
    query = select(FitnessHabit).where(
        and_(FitnessHabit.user_id == user_id, FitnessHabit.habit_name == habit_name)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_fitness_habit_logs(
    db: AsyncSession, user_id: UUID, day: date
) -> list[FitnessHabitLog]:
    query = select(FitnessHabitLog).where(
        and_(FitnessHabitLog.user_id == user_id, FitnessHabitLog.date == day)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_fitness_habit_log(
    db: AsyncSession, user_id: UUID, habit_id: UUID, day: date
) -> FitnessHabitLog | None:
    query = select(FitnessHabitLog).where(
        and_(
            FitnessHabitLog.user_id == user_id,
            FitnessHabitLog.habit_id == habit_id,
            FitnessHabitLog.date == day,
        )
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_body_tracking(
    db: AsyncSession, user_id: UUID, day: date
) -> BodyTracking | None:
    return await get_for_date(db, BodyTracking, user_id, day)


async def get_training_session(
    db: AsyncSession, user_id: UUID, day: date
) -> TrainingSession | None:
    return await get_for_date(db, TrainingSession, user_id, day)
