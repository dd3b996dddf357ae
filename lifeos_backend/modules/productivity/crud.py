"""CRUD operations for the productivity module."""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import (
    ACTIVE_GOAL_STATUSES,
    CLOSED_INBOX_STATUSES,
    CLOSED_TICKET_STATUSES,
    Goal,
    InboxItem,
    InboxStatus,
    Meeting,
    MeetingActionItem,
    Ticket,
)


class InboxItemCRUD(BaseCRUD[InboxItem, dict, dict]):
    search_fields = ["title", "description"]


class MeetingCRUD(BaseCRUD[Meeting, dict, dict]):
    search_fields = ["title", "location"]
    default_order_by = "start_time"


class GoalCRUD(BaseCRUD[Goal, dict, dict]):
    search_fields = ["title", "description"]


class TicketCRUD(BaseCRUD[Ticket, dict, dict]):
    search_fields = ["title", "description"]


inbox_items = InboxItemCRUD(InboxItem)
meetings = MeetingCRUD(Meeting)
goals = GoalCRUD(Goal)
tickets = TicketCRUD(Ticket)


# ----- Inbox -----


async def get_today_tasks(
    db: AsyncSession, user_id: UUID, today: date, limit: int = 10
) -> list[InboxItem]:
    """Open tasks due today, scheduled today or flagged for today."""
    result = await db.execute(
        select(InboxItem)
        .where(
            and_(
                InboxItem.user_id == user_id,
                or_(
                    InboxItem.due_date == today,
                    InboxItem.scheduled_date == today,
                    InboxItem.status == InboxStatus.TODAY.value,
                ),
                InboxItem.status.not_in(CLOSED_INBOX_STATUSES),
            )
        )
        .order_by(InboxItem.priority.asc().nulls_last(), InboxItem.created_at)
        .limit(limit)
    )
    return list(result.scalars().all())


async def count_open_inbox_items(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(
        select(func.count(InboxItem.id)).where(
            and_(
                InboxItem.user_id == user_id,
                InboxItem.status.not_in(CLOSED_INBOX_STATUSES),
            )
        )
    )
    return result.scalar() or 0


async def count_overdue_inbox_items(db: AsyncSession, user_id: UUID, today: date) -> int:
    result = await db.execute(
        select(func.count(InboxItem.id)).where(
            and_(
                InboxItem.user_id == user_id,
                InboxItem.due_date < today,
                InboxItem.status.not_in(CLOSED_INBOX_STATUSES),
            )
        )
    )
    return result.scalar() or 0


# ----- Meetings -----


async def get_meetings_between(
    db: AsyncSession, user_id: UUID, start: datetime, end: datetime
) -> list[Meeting]:
    """Meetings starting in ``[start, end)``, in chronological order."""
    result = await db.execute(
        select(Meeting)
        .where(
            and_(
                Meeting.user_id == user_id,
                Meeting.start_time >= start,
                Meeting.start_time < end,
            )
        )
        .order_by(Meeting.start_time)
    )
    return list(result.scalars().all())


async def get_action_items(
    db: AsyncSession, user_id: UUID, meeting_id: UUID
) -> list[MeetingActionItem]:
    result = await db.execute(
        select(MeetingActionItem)
        .where(
            and_(
                MeetingActionItem.user_id == user_id,
                MeetingActionItem.meeting_id == meeting_id,
            )
        )
        .order_by(
            MeetingActionItem.due_date.asc().nulls_last(),
            MeetingActionItem.created_at,
        )
    )
    return list(result.scalars().all())


async def get_action_item(
    db: AsyncSession, user_id: UUID, action_item_id: UUID
) -> MeetingActionItem | None:
    result = await db.execute(
        select(MeetingActionItem).where(
            and_(
                MeetingActionItem.user_id == user_id,
                MeetingActionItem.id == action_item_id,
            )
        )
    )
    return result.scalar_one_or_none()


# ----- Goals / Tickets -----


async def count_active_goals(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(
        select(func.count(Goal.id)).where(
            and_(Goal.user_id == user_id, Goal.status.in_(ACTIVE_GOAL_STATUSES))
        )
    )
    return result.scalar() or 0


async def count_open_tickets(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(
        select(func.count(Ticket.id)).where(
            and_(
                Ticket.user_id == user_id,
                Ticket.status.not_in(CLOSED_TICKET_STATUSES),
            )
        )
    )
    return result.scalar() or 0
