"""CRUD operations for AI insights."""

from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import AIInsight, InsightPriority

ALERT_PRIORITIES = (InsightPriority.ACTION_REQUIRED.value, InsightPriority.WARNING.value)


class InsightCRUD(BaseCRUD[AIInsight, dict, dict]):
    search_fields = ["title", "message"]


insights = InsightCRUD(AIInsight)


async def get_pending_insights(
    db: AsyncSession, user_id: UUID, limit: int = 10
) -> list[AIInsight]:
    """Unread insights plus action-required ones not yet actioned, newest first."""
    query = (
        select(AIInsight)
        .where(
            and_(
                AIInsight.user_id == user_id,
                or_(
                    AIInsight.is_read.is_(False),
                    and_(
                        AIInsight.priority == InsightPriority.ACTION_REQUIRED.value,
                        AIInsight.is_actioned.is_(False),
                    ),
                ),
            )
        )
        .order_by(AIInsight.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_alerts(db: AsyncSession, user_id: UUID, limit: int = 5) -> list[AIInsight]:
    query = (
        select(AIInsight)
        .where(
            and_(
                AIInsight.user_id == user_id,
                AIInsight.priority.in_(ALERT_PRIORITIES),
                AIInsight.is_actioned.is_(False),
            )
        )
        .order_by(AIInsight.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())
