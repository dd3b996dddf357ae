"""CRUD operations for the health module."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import DailyLog, DailyReadiness, GarminDailyStats, Habit, HabitLog


class HabitCRUD(BaseCRUD[Habit, dict, dict]):
    search_fields = ["name"]
    default_order_by = "sort_order"
    default_order_desc = False


habits = HabitCRUD(Habit)


async def get_logs_for_date(
    db: AsyncSession, user_id: UUID, day: date
) -> list[HabitLog]:
    query = select(HabitLog).where(
        and_(HabitLog.user_id == user_id, HabitLog.date == day)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_habit_log(
    db: AsyncSession, user_id: UUID, habit_id: UUID, day: date
) -> HabitLog | None:
    query = select(HabitLog).where(
        and_(
            HabitLog.user_id == user_id,
            HabitLog.habit_id == habit_id,
            HabitLog.date == day,
        )
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_completed_dates(
    db: AsyncSession, user_id: UUID, habit_id: UUID, until: date
) -> list[date]:
    """Completed log dates of a habit up to ``until``, newest first."""
    query = (
        select(HabitLog.date)
        .where(
            and_(
                HabitLog.user_id == user_id,
                HabitLog.habit_id == habit_id,
                HabitLog.is_completed.is_(True),
                HabitLog.date <= until,
            )
        )
        .order_by(HabitLog.date.desc())
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_for_date(
    db: AsyncSession, model: Any, user_id: UUID, day: date
) -> Any | None:
    """The row of a per-day table (stats, readiness, daily log) for a date."""
    query = select(model).where(and_(model.user_id == user_id, model.date == day))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_garmin_stats(
    db: AsyncSession, user_id: UUID, day: date
) -> GarminDailyStats | None:
    return await get_for_date(db, GarminDailyStats, user_id, day)


async def get_readiness(
    db: AsyncSession, user_id: UUID, day: date
) -> DailyReadiness | None:
    return await get_for_date(db, DailyReadiness, user_id, day)


async def get_daily_log(db: AsyncSession, user_id: UUID, day: date) -> DailyLog | None:
    return await get_for_date(db, DailyLog, user_id, day)
