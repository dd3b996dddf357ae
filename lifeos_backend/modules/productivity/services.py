"""Productivity business logic services."""

from datetime import date, datetime, time, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import NotFoundError, ValidationError
from ...core.logging import get_logger
from ...core.utils import ensure_utc, utc_now
from ..automation import services as automation
from ..automation.client import N8nWebhookClient
from ..automation.schemas import MeetingMinutesPayload
from . import crud
from .models import (
    ActionItemStatus,
    Goal,
    GoalTimeframe,
    InboxItem,
    InboxSource,
    InboxStatus,
    Meeting,
    MeetingActionItem,
    Ticket,
    TicketStatus,
)
from .schemas import (
    GoalCreate,
    GoalUpdate,
    InboxItemCreate,
    InboxItemUpdate,
    MeetingCreate,
    MeetingMinutesUpdate,
    MeetingUpdate,
    TicketCreate,
    TicketUpdate,
    meeting_duration,
)

logger = get_logger(__name__)


# ----- Inbox Items -----


async def get_inbox_item(db: AsyncSession, user_id: UUID, item_id: UUID) -> InboxItem:
    item = await crud.inbox_items.get(db, user_id, item_id)
    if not item:
        raise NotFoundError(f"Inbox item with ID {item_id} not found")
    return item


async def create_inbox_item(
    db: AsyncSession, user_id: UUID, data: InboxItemCreate
) -> InboxItem:
    values = data.model_dump()
    if data.status == InboxStatus.DONE:
        values["completed_at"] = utc_now()
    return await crud.inbox_items.create(db, values, user_id)


async def update_inbox_item(
    db: AsyncSession, user_id: UUID, item_id: UUID, data: InboxItemUpdate
) -> InboxItem:
    item = await get_inbox_item(db, user_id, item_id)
    updates = data.model_dump(exclude_unset=True)

    if "status" in updates:
        if updates["status"] == InboxStatus.DONE and item.status != InboxStatus.DONE.value:
            updates["completed_at"] = utc_now()
        elif updates["status"] != InboxStatus.DONE:
            updates["completed_at"] = None

    return await crud.inbox_items.update(db, item, updates)


async def delete_inbox_item(db: AsyncSession, user_id: UUID, item_id: UUID) -> None:
    item = await get_inbox_item(db, user_id, item_id)
    await crud.inbox_items.delete(db, item)


async def get_today_tasks(
    db: AsyncSession, user_id: UUID, today: date, limit: int = 10
) -> list[InboxItem]:
    return await crud.get_today_tasks(db, user_id, today, limit)


# ----- Meetings -----


def day_bounds(day: date, tz_name: str | None = None) -> tuple[datetime, datetime]:
    """Start and end of a local calendar day as aware datetimes."""
    tz = ZoneInfo(tz_name or settings.timezone)
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, start + timedelta(days=1)


async def get_meeting(db: AsyncSession, user_id: UUID, meeting_id: UUID) -> Meeting:
    meeting = await crud.meetings.get(db, user_id, meeting_id)
    if not meeting:
        raise NotFoundError(f"Meeting with ID {meeting_id} not found")
    return meeting


async def create_meeting(db: AsyncSession, user_id: UUID, data: MeetingCreate) -> Meeting:
    values = data.model_dump(mode="json", include={"attendees"})
    values.update(data.model_dump(exclude={"attendees"}))
    values["duration_minutes"] = data.duration_minutes
    return await crud.meetings.create(db, values, user_id)


async def update_meeting(
    db: AsyncSession, user_id: UUID, meeting_id: UUID, data: MeetingUpdate
) -> Meeting:
    meeting = await get_meeting(db, user_id, meeting_id)
    updates = data.model_dump(exclude_unset=True, exclude={"attendees"})
    if "attendees" in data.model_fields_set:
        updates["attendees"] = data.model_dump(mode="json")["attendees"] or None

    start_time = ensure_utc(updates.get("start_time", meeting.start_time))
    end_time = ensure_utc(updates.get("end_time", meeting.end_time))
    if start_time is None:
        raise ValidationError("is required", field="start_time")
    if end_time is not None and end_time < start_time:
        raise ValidationError("must not precede start_time", field="end_time")
    if "start_time" in updates or "end_time" in updates:
        updates["duration_minutes"] = meeting_duration(start_time, end_time)

    return await crud.meetings.update(db, meeting, updates)


async def delete_meeting(db: AsyncSession, user_id: UUID, meeting_id: UUID) -> None:
    meeting = await get_meeting(db, user_id, meeting_id)
    await crud.meetings.delete(db, meeting)


async def get_meetings_on(db: AsyncSession, user_id: UUID, day: date) -> list[Meeting]:
    start, end = day_bounds(day)
    return await crud.get_meetings_between(db, user_id, start, end)


async def save_meeting_minutes(
    db: AsyncSession, user_id: UUID, meeting_id: UUID, data: MeetingMinutesUpdate
) -> Meeting:
    """Store transcript and summary; blank values clear them."""
    meeting = await get_meeting(db, user_id, meeting_id)
    return await crud.meetings.update(
        db, meeting, {"transcript": data.transcript, "summary": data.summary}
    )


async def process_meeting_with_ai(
    db: AsyncSession,
    user_id: UUID,
    meeting_id: UUID,
    client: N8nWebhookClient,
    transcript: str | None = None,
) -> tuple[Meeting, list[MeetingActionItem]]:
    """Summarise a meeting via n8n and file its action items.

    Every extracted action item becomes an inbox item with source
    ``meeting`` plus a link row back to the meeting.
    """
    meeting = await get_meeting(db, user_id, meeting_id)
    text = (transcript if transcript is not None else meeting.transcript or "").strip()
    if not text:
        raise ValidationError("Meeting notes are empty", field="transcript")

    result = await automation.process_meeting_minutes(
        client,
        MeetingMinutesPayload(
            meeting_id=meeting.id,
            meeting_title=meeting.title,
            meeting_date=meeting.start_time,
            attendees=meeting.attendees,
            transcript=text,
        ),
    )

    meeting.transcript = text
    if result.summary:
        meeting.summary = result.summary

    action_items = []
    for suggestion in result.action_items:
        inbox_item = InboxItem(
            user_id=user_id,
            title=suggestion.title,
            description=suggestion.description,
            due_date=suggestion.due_date,
            priority=suggestion.priority,
            status=InboxStatus.INBOX.value,
            source=InboxSource.MEETING.value,
        )
        db.add(inbox_item)
        await db.flush()

        action_item = MeetingActionItem(
            user_id=user_id,
            meeting_id=meeting.id,
            inbox_item_id=inbox_item.id,
            extracted_text=suggestion.title,
            assigned_to=suggestion.assigned_to,
            due_date=suggestion.due_date,
            status=ActionItemStatus.PENDING.value,
        )
        db.add(action_item)
        action_items.append(action_item)

    await db.commit()
    await db.refresh(meeting)
    for action_item in action_items:
        await db.refresh(action_item)

    logger.info(
        f"Meeting {meeting.id} filed {len(action_items)} action items to the inbox"
    )

    return meeting, action_items


async def get_action_items(
    db: AsyncSession, user_id: UUID, meeting_id: UUID
) -> list[MeetingActionItem]:
    await get_meeting(db, user_id, meeting_id)
    return await crud.get_action_items(db, user_id, meeting_id)


async def set_action_item_status(
    db: AsyncSession, user_id: UUID, action_item_id: UUID, status: ActionItemStatus
) -> MeetingActionItem:
    """Update an action item and keep its inbox item in step."""
    action_item = await crud.get_action_item(db, user_id, action_item_id)
    if not action_item:
        raise NotFoundError(f"Action item with ID {action_item_id} not found")

    action_item.status = status.value
    if action_item.inbox_item_id:
        inbox_item = await crud.inbox_items.get(db, user_id, action_item.inbox_item_id)
        if inbox_item:
            completed = status == ActionItemStatus.COMPLETED
            inbox_item.status = (
                InboxStatus.DONE.value if completed else InboxStatus.INBOX.value
            )
            inbox_item.completed_at = utc_now() if completed else None

    await db.commit()
    await db.refresh(action_item)
    return action_item


# ----- Goals -----


def goal_period(timeframe: GoalTimeframe, today: date) -> dict[str, int | None]:
    """Year plus the quarter, month or ISO week matching the timeframe."""
    return {
        "year": today.year,
        "quarter": (today.month - 1) // 3 + 1
        if timeframe == GoalTimeframe.QUARTERLY
        else None,
        "month": today.month if timeframe == GoalTimeframe.MONTHLY else None,
        "week": today.isocalendar().week if timeframe == GoalTimeframe.WEEKLY else None,
    }


def goal_progress(current_value: float | None, target_value: float | None) -> float | None:
    """Progress in percent, capped at 100; None without a target."""
    if not target_value or target_value <= 0:
        return None
    return min(100.0, (current_value or 0) / target_value * 100)


async def get_goal(db: AsyncSession, user_id: UUID, goal_id: UUID) -> Goal:
    goal = await crud.goals.get(db, user_id, goal_id)
    if not goal:
        raise NotFoundError(f"Goal with ID {goal_id} not found")
    return goal


async def create_goal(
    db: AsyncSession, user_id: UUID, data: GoalCreate, today: date
) -> Goal:
    if data.parent_goal_id is not None:
        await get_goal(db, user_id, data.parent_goal_id)

    values = data.model_dump()
    values.update(goal_period(data.timeframe, today))
    values["current_value"] = 0
    values["progress_percent"] = 0
    return await crud.goals.create(db, values, user_id)


async def update_goal(
    db: AsyncSession, user_id: UUID, goal_id: UUID, data: GoalUpdate
) -> Goal:
    goal = await get_goal(db, user_id, goal_id)
    updates = data.model_dump(exclude_unset=True)

    start_date = updates.get("start_date", goal.start_date)
    end_date = updates.get("end_date", goal.end_date)
    if start_date and end_date and end_date < start_date:
        raise ValidationError("must not precede start_date", field="end_date")

    if "current_value" in updates or "target_value" in updates:
        progress = goal_progress(
            updates.get("current_value", goal.current_value),
            updates.get("target_value", goal.target_value),
        )
        if progress is not None or "target_value" in updates:
            updates["progress_percent"] = progress

    return await crud.goals.update(db, goal, updates)


async def update_goal_progress(
    db: AsyncSession, user_id: UUID, goal_id: UUID, current_value: float
) -> Goal:
    goal = await get_goal(db, user_id, goal_id)
    updates = {"current_value": current_value}
    progress = goal_progress(current_value, goal.target_value)
    if progress is not None:
        updates["progress_percent"] = progress
    return await crud.goals.update(db, goal, updates)


async def delete_goal(db: AsyncSession, user_id: UUID, goal_id: UUID) -> None:
    goal = await get_goal(db, user_id, goal_id)
    await crud.goals.delete(db, goal)


# ----- Tickets -----


async def get_ticket(db: AsyncSession, user_id: UUID, ticket_id: UUID) -> Ticket:
    ticket = await crud.tickets.get(db, user_id, ticket_id)
    if not ticket:
        raise NotFoundError(f"Ticket with ID {ticket_id} not found")
    return ticket


async def create_ticket(db: AsyncSession, user_id: UUID, data: TicketCreate) -> Ticket:
    return await crud.tickets.create(db, data.model_dump(), user_id)


async def update_ticket(
    db: AsyncSession, user_id: UUID, ticket_id: UUID, data: TicketUpdate
) -> Ticket:
    ticket = await get_ticket(db, user_id, ticket_id)
    updates = data.model_dump(exclude_unset=True)
    if updates.get("status") == TicketStatus.COMPLETED and ticket.resolved_at is None:
        updates["resolved_at"] = utc_now()
    return await crud.tickets.update(db, ticket, updates)


async def delete_ticket(db: AsyncSession, user_id: UUID, ticket_id: UUID) -> None:
    ticket = await get_ticket(db, user_id, ticket_id)
    await crud.tickets.delete(db, ticket)
