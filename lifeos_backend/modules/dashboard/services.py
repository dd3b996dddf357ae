"""Dashboard services: quick stats, AI insights and the today overview."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError
from ..health import crud as health_crud
from ..health import services as health_services
from ..health.schemas import DailyLogResponse, GarminStatsResponse, ReadinessResponse
from ..productivity import crud as productivity_crud
from ..productivity import services as productivity_services
from ..productivity.schemas import InboxItemResponse, MeetingResponse
from ..wealth import crud as wealth_crud
from ..wealth.calculations import compute_fire_progress
from . import crud
from .models import AIInsight, InsightPriority
from .schemas import InsightResponse, QuickStats, TodayOverview

PRIORITY_RANK = {
    InsightPriority.ACTION_REQUIRED.value: 1,
    InsightPriority.WARNING.value: 2,
    InsightPriority.INFO.value: 3,
}


def sort_by_priority(insights: list[AIInsight]) -> list[AIInsight]:
    """Order action_required < warning < info < anything else.

    The sort is stable, so recency order is kept within a priority.
    """
    return sorted(insights, key=lambda insight: PRIORITY_RANK.get(insight.priority, 4))


async def get_quick_stats(db: AsyncSession, user_id: UUID, today: date) -> QuickStats:
    snapshot = await wealth_crud.get_latest_snapshot(db, user_id)
    preferences = await wealth_crud.get_preferences(db, user_id)
    fire = compute_fire_progress(snapshot, preferences)

    def snapshot_value(attr: str) -> float:
        return float((getattr(snapshot, attr) if snapshot else None) or 0)

    return QuickStats(
        net_worth=snapshot_value("net_worth"),
        total_assets=snapshot_value("total_assets"),
        total_liabilities=snapshot_value("total_liabilities"),
        cash_value=snapshot_value("cash_value"),
        investment_value=snapshot_value("investment_value"),
        property_value=snapshot_value("property_value"),
        inbox_count=await productivity_crud.count_open_inbox_items(db, user_id),
        overdue_count=await productivity_crud.count_overdue_inbox_items(db, user_id, today),
        open_tickets=await productivity_crud.count_open_tickets(db, user_id),
        active_goals=await productivity_crud.count_active_goals(db, user_id),
        fire_progress=fire.progress,
        fire_target=fire.target_amount,
    )


async def get_pending_insights(
    db: AsyncSession, user_id: UUID, limit: int = 10
) -> list[AIInsight]:
    insights = await crud.get_pending_insights(db, user_id, limit)
    return sort_by_priority(insights)


async def get_alerts(db: AsyncSession, user_id: UUID) -> list[AIInsight]:
    return await crud.get_alerts(db, user_id)


async def get_insight(db: AsyncSession, user_id: UUID, insight_id: UUID) -> AIInsight:
    insight = await crud.insights.get(db, user_id, insight_id)
    if not insight:
        raise NotFoundError(f"Insight with ID {insight_id} not found")
    return insight


async def mark_insight_read(
    db: AsyncSession, user_id: UUID, insight_id: UUID
) -> AIInsight:
    insight = await get_insight(db, user_id, insight_id)
    return await crud.insights.update(db, insight, {"is_read": True})


async def mark_insight_actioned(
    db: AsyncSession, user_id: UUID, insight_id: UUID, action_taken: str | None = None
) -> AIInsight:
    """Close an insight; actioning implies it was read."""
    insight = await get_insight(db, user_id, insight_id)
    return await crud.insights.update(
        db,
        insight,
        {"is_read": True, "is_actioned": True, "action_taken": action_taken},
    )


async def get_today_overview(
    db: AsyncSession, user_id: UUID, today: date
) -> TodayOverview:
    garmin = await health_crud.get_garmin_stats(db, user_id, today)
    readiness = await health_crud.get_readiness(db, user_id, today)
    daily_log = await health_crud.get_daily_log(db, user_id, today)
    habits = await health_services.get_habits_for_day(db, user_id, today)
    meetings = await productivity_services.get_meetings_on(db, user_id, today)
    tasks = await productivity_services.get_today_tasks(db, user_id, today)

    return TodayOverview(
        date=today,
        quick_stats=await get_quick_stats(db, user_id, today),
        garmin=GarminStatsResponse.model_validate(garmin) if garmin else None,
        readiness=ReadinessResponse.model_validate(readiness) if readiness else None,
        daily_log=DailyLogResponse.model_validate(daily_log) if daily_log else None,
        habits=habits,
        habits_completed=sum(1 for habit in habits if habit.is_completed),
        meetings=[MeetingResponse.model_validate(m) for m in meetings],
        tasks=[InboxItemResponse.model_validate(t) for t in tasks],
        insights=[
            InsightResponse.model_validate(i)
            for i in await get_pending_insights(db, user_id)
        ],
        alerts=[InsightResponse.model_validate(a) for a in await get_alerts(db, user_id)],
    )
