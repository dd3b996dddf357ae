"""Dashboard API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import local_today
from ...database import get_db
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from . import services
from .schemas import InsightActioned, InsightResponse, QuickStats, TodayOverview

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/today", response_model=BaseResponse[TodayOverview])
async def get_today_overview(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get everything the start page shows for today."""
    overview = await services.get_today_overview(db, current_user.id, local_today())
    return BaseResponse(success=True, data=overview)


@router.get("/quick-stats", response_model=BaseResponse[QuickStats])
async def get_quick_stats(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    stats = await services.get_quick_stats(db, current_user.id, local_today())
    return BaseResponse(success=True, data=stats)


@router.get("/insights", response_model=BaseResponse[list[InsightResponse]])
async def get_pending_insights(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(10, ge=1, le=50),
):
    """Get unread and open action-required insights, most urgent first."""
    insights = await services.get_pending_insights(db, current_user.id, limit)
    return BaseResponse(
        success=True, data=[InsightResponse.model_validate(i) for i in insights]
    )


@router.get("/alerts", response_model=BaseResponse[list[InsightResponse]])
async def get_alerts(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    alerts = await services.get_alerts(db, current_user.id)
    return BaseResponse(
        success=True, data=[InsightResponse.model_validate(a) for a in alerts]
    )


@router.post("/insights/{insight_id}/read", response_model=BaseResponse[InsightResponse])
async def mark_insight_read(
    insight_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    insight = await services.mark_insight_read(db, current_user.id, insight_id)
    return BaseResponse(success=True, data=InsightResponse.model_validate(insight))


@router.post(
    "/insights/{insight_id}/actioned", response_model=BaseResponse[InsightResponse]
)
async def mark_insight_actioned(
    insight_id: UUID,
    data: InsightActioned,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    insight = await services.mark_insight_actioned(
        db, current_user.id, insight_id, data.action_taken
    )
    return BaseResponse(success=True, data=InsightResponse.model_validate(insight))
