"""Health API routes."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import local_today
from ...database import get_db
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from . import crud, services
from .schemas import (
    DailyLogResponse,
    DailyLogUpsert,
    GarminStatsResponse,
    HabitCreate,
    HabitLogResponse,
    HabitResponse,
    HabitStreak,
    HabitToday,
    HabitToggle,
    HabitUpdate,
    ReadinessResponse,
)

router = APIRouter(prefix="/health", tags=["Health"])


# ----- Habits -----


@router.get("/habits", response_model=BaseResponse[list[HabitResponse]])
async def list_habits(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    is_active: bool | None = Query(True),
):
    habits = await crud.habits.get_all(db, current_user.id, is_active=is_active)
    return BaseResponse(
        success=True, data=[HabitResponse.model_validate(h) for h in habits]
    )


@router.get("/habits/today", response_model=BaseResponse[list[HabitToday]])
async def get_today_habits(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    """Get active habits with their completion for the day."""
    habits = await services.get_habits_for_day(db, current_user.id, day or local_today())
    return BaseResponse(success=True, data=habits)


@router.post("/habits", response_model=BaseResponse[HabitResponse])
async def create_habit(
    data: HabitCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    habit = await services.create_habit(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Habit created successfully",
        data=HabitResponse.model_validate(habit),
    )


@router.patch("/habits/{habit_id}", response_model=BaseResponse[HabitResponse])
async def update_habit(
    habit_id: UUID,
    data: HabitUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    habit = await services.update_habit(db, current_user.id, habit_id, data)
    return BaseResponse(
        success=True,
        message="Habit updated successfully",
        data=HabitResponse.model_validate(habit),
    )


@router.delete("/habits/{habit_id}", response_model=BaseResponse[None])
async def delete_habit(
    habit_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_habit(db, current_user.id, habit_id)
    return BaseResponse(success=True, message="Habit deleted successfully")


@router.put("/habits/{habit_id}/log", response_model=BaseResponse[HabitLogResponse])
async def toggle_habit(
    habit_id: UUID,
    data: HabitToggle,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Mark a habit done or open for a day, today by default."""
    log = await services.toggle_habit(
        db,
        current_user.id,
        habit_id,
        data.date or local_today(),
        data.is_completed,
        data.value,
    )
    return BaseResponse(success=True, data=HabitLogResponse.model_validate(log))


@router.get("/habits/{habit_id}/streak", response_model=BaseResponse[HabitStreak])
async def get_habit_streak(
    habit_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    streak = await services.get_habit_streak(db, current_user.id, habit_id, local_today())
    return BaseResponse(success=True, data=streak)


# ----- Daily data -----


@router.get("/garmin", response_model=BaseResponse[GarminStatsResponse | None])
async def get_garmin_stats(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    """Get the Garmin statistics of a day, today by default."""
    stats = await crud.get_garmin_stats(db, current_user.id, day or local_today())
    return BaseResponse(
        success=True,
        data=GarminStatsResponse.model_validate(stats) if stats else None,
    )


@router.get("/readiness", response_model=BaseResponse[ReadinessResponse | None])
async def get_readiness(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    readiness = await crud.get_readiness(db, current_user.id, day or local_today())
    return BaseResponse(
        success=True,
        data=ReadinessResponse.model_validate(readiness) if readiness else None,
    )


@router.get("/daily-log", response_model=BaseResponse[DailyLogResponse | None])
async def get_daily_log(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    log = await crud.get_daily_log(db, current_user.id, day or local_today())
    return BaseResponse(
        success=True, data=DailyLogResponse.model_validate(log) if log else None
    )


@router.put("/daily-log", response_model=BaseResponse[DailyLogResponse])
async def upsert_daily_log(
    data: DailyLogUpsert,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    """Create or update the journal entry of a day."""
    log = await services.upsert_daily_log(db, current_user.id, day or local_today(), data)
    return BaseResponse(success=True, data=DailyLogResponse.model_validate(log))
