"""Health business logic services."""

from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError
from ...core.logging import get_logger
from . import crud
from .models import DailyLog, Habit, HabitLog
from .schemas import (
    DailyLogUpsert,
    HabitCreate,
    HabitLogResponse,
    HabitResponse,
    HabitStreak,
    HabitToday,
    HabitUpdate,
)

logger = get_logger(__name__)


def count_streak(completed_dates: list[date], today: date) -> int:
    """Consecutive completed days ending today or yesterday.

    A habit not yet done today keeps yesterday's streak alive; a gap of a
    full day resets it to 0. ``completed_dates`` may be in any order.
    """
    days = set(completed_dates)
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def merge_habits_with_logs(habits: list[Habit], logs: list[HabitLog]) -> list[HabitToday]:
    """Attach each habit's log for the day; habits without one are open."""
    logs_by_habit = {log.habit_id: log for log in logs}
    merged = []
    for habit in habits:
        log = logs_by_habit.get(habit.id)
        merged.append(
            HabitToday(
                **HabitResponse.model_validate(habit).model_dump(),
                today_log=HabitLogResponse.model_validate(log) if log else None,
                is_completed=bool(log and log.is_completed),
            )
        )
    return merged


async def get_habit(db: AsyncSession, user_id: UUID, habit_id: UUID) -> Habit:
    habit = await crud.habits.get(db, user_id, habit_id)
    if not habit:
        raise NotFoundError(f"Habit with ID {habit_id} not found")
    return habit


async def create_habit(db: AsyncSession, user_id: UUID, data: HabitCreate) -> Habit:
    return await crud.habits.create(db, data.model_dump(), user_id)


async def update_habit(
    db: AsyncSession, user_id: UUID, habit_id: UUID, data: HabitUpdate
) -> Habit:
    habit = await get_habit(db, user_id, habit_id)
    return await crud.habits.update(db, habit, data.model_dump(exclude_unset=True))


async def delete_habit(db: AsyncSession, user_id: UUID, habit_id: UUID) -> None:
    habit = await get_habit(db, user_id, habit_id)
    await crud.habits.delete(db, habit)


async def get_habits_for_day(
    db: AsyncSession, user_id: UUID, day: date
) -> list[HabitToday]:
    habits = await crud.habits.get_all(db, user_id, is_active=True)
    logs = await crud.get_logs_for_date(db, user_id, day)
    return merge_habits_with_logs(habits, logs)


async def toggle_habit(
    db: AsyncSession,
    user_id: UUID,
    habit_id: UUID,
    day: date,
    is_completed: bool,
    value: float | None = None,
) -> HabitLog:
    """Set the completion of a habit for a day, creating the log if needed."""
    await get_habit(db, user_id, habit_id)

    log = await crud.get_habit_log(db, user_id, habit_id, day)
    if log:
        log.is_completed = is_completed
        if value is not None:
            log.value = value
    else:
        log = HabitLog(
            user_id=user_id,
            habit_id=habit_id,
            date=day,
            is_completed=is_completed,
            value=value,
        )
        db.add(log)

    await db.commit()
    await db.refresh(log)
    return log


async def get_habit_streak(
    db: AsyncSession, user_id: UUID, habit_id: UUID, today: date
) -> HabitStreak:
    await get_habit(db, user_id, habit_id)
    completed = await crud.get_completed_dates(db, user_id, habit_id, today)
    return HabitStreak(
        habit_id=habit_id,
        current_streak=count_streak(completed, today),
        last_completed=completed[0] if completed else None,
    )


async def upsert_daily_log(
    db: AsyncSession, user_id: UUID, day: date, data: DailyLogUpsert
) -> DailyLog:
    """Merge the given fields into the journal entry for a day."""
    values = data.model_dump(exclude_unset=True)
    log = await crud.get_daily_log(db, user_id, day)
    if log:
        for field, value in values.items():
            setattr(log, field, value)
    else:
        log = DailyLog(user_id=user_id, date=day, **values)
        db.add(log)

    await db.commit()
    await db.refresh(log)
    logger.info(f"Stored daily log for {day.isoformat()}")
    return log
