"""Productivity API routes: inbox, meetings, goals and tickets."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import local_today
from ...database import get_db
from ..auth.dependencies import CurrentUser
from ..automation.dependencies import WebhookClient
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import crud, services
from .models import (
    GoalArea,
    GoalStatus,
    GoalTimeframe,
    InboxStatus,
    TicketPriority,
    TicketStatus,
)
from .schemas import (
    GoalCreate,
    GoalProgressUpdate,
    GoalResponse,
    GoalUpdate,
    InboxItemCreate,
    InboxItemResponse,
    InboxItemUpdate,
    MeetingActionItemResponse,
    MeetingActionItemUpdate,
    MeetingCreate,
    MeetingMinutesUpdate,
    MeetingProcessingResponse,
    MeetingProcessRequest,
    MeetingResponse,
    MeetingUpdate,
    TicketCreate,
    TicketResponse,
    TicketUpdate,
)

inbox_router = APIRouter(prefix="/inbox", tags=["Inbox"])
meetings_router = APIRouter(prefix="/meetings", tags=["Meetings"])
goals_router = APIRouter(prefix="/goals", tags=["Goals"])
tickets_router = APIRouter(prefix="/tickets", tags=["Tickets"])


# ----- Inbox -----


@inbox_router.get("", response_model=BaseResponse[PaginatedResponse[InboxItemResponse]])
async def list_inbox_items(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    status: InboxStatus | None = Query(None),
    priority: int | None = Query(None, ge=1, le=4),
    search: str | None = Query(None),
):
    """Get inbox items with pagination and filtering."""
    items, total = await crud.inbox_items.get_multi(
        db,
        current_user.id,
        pagination=PaginationParams(page=page, page_size=page_size),
        search_query=search,
        filters={
            "status": status.value if status else None,
            "priority": priority,
        },
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[InboxItemResponse.model_validate(i) for i in items],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@inbox_router.get("/today", response_model=BaseResponse[list[InboxItemResponse]])
async def get_today_tasks(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(10, ge=1, le=50),
):
    """Get open tasks due, scheduled or marked for today."""
    tasks = await services.get_today_tasks(db, current_user.id, local_today(), limit)
    return BaseResponse(
        success=True, data=[InboxItemResponse.model_validate(t) for t in tasks]
    )


@inbox_router.get("/{item_id}", response_model=BaseResponse[InboxItemResponse])
async def get_inbox_item(
    item_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    item = await services.get_inbox_item(db, current_user.id, item_id)
    return BaseResponse(success=True, data=InboxItemResponse.model_validate(item))


@inbox_router.post("", response_model=BaseResponse[InboxItemResponse])
async def create_inbox_item(
    data: InboxItemCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Capture a new inbox item."""
    item = await services.create_inbox_item(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Inbox item created successfully",
        data=InboxItemResponse.model_validate(item),
    )


@inbox_router.patch("/{item_id}", response_model=BaseResponse[InboxItemResponse])
async def update_inbox_item(
    item_id: UUID,
    data: InboxItemUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update an inbox item; moving it to done stamps completed_at."""
    item = await services.update_inbox_item(db, current_user.id, item_id, data)
    return BaseResponse(
        success=True,
        message="Inbox item updated successfully",
        data=InboxItemResponse.model_validate(item),
    )


@inbox_router.delete("/{item_id}", response_model=BaseResponse[None])
async def delete_inbox_item(
    item_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_inbox_item(db, current_user.id, item_id)
    return BaseResponse(success=True, message="Inbox item deleted successfully")


# ----- Meetings -----


@meetings_router.get("", response_model=BaseResponse[PaginatedResponse[MeetingResponse]])
async def list_meetings(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: str | None = Query(None),
):
    """Get meetings, newest first."""
    meetings, total = await crud.meetings.get_multi(
        db,
        current_user.id,
        pagination=PaginationParams(page=page, page_size=page_size),
        search_query=search,
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[MeetingResponse.model_validate(m) for m in meetings],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@meetings_router.get("/today", response_model=BaseResponse[list[MeetingResponse]])
async def get_today_meetings(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    """Get the meetings of a local calendar day, today by default."""
    meetings = await services.get_meetings_on(db, current_user.id, day or local_today())
    return BaseResponse(
        success=True, data=[MeetingResponse.model_validate(m) for m in meetings]
    )


@meetings_router.get("/{meeting_id}", response_model=BaseResponse[MeetingResponse])
async def get_meeting(
    meeting_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    meeting = await services.get_meeting(db, current_user.id, meeting_id)
    return BaseResponse(success=True, data=MeetingResponse.model_validate(meeting))


@meetings_router.post("", response_model=BaseResponse[MeetingResponse])
async def create_meeting(
    data: MeetingCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a meeting; duration is derived from start and end time."""
    meeting = await services.create_meeting(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Meeting created successfully",
        data=MeetingResponse.model_validate(meeting),
    )


@meetings_router.patch("/{meeting_id}", response_model=BaseResponse[MeetingResponse])
async def update_meeting(
    meeting_id: UUID,
    data: MeetingUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    meeting = await services.update_meeting(db, current_user.id, meeting_id, data)
    return BaseResponse(
        success=True,
        message="Meeting updated successfully",
        data=MeetingResponse.model_validate(meeting),
    )


@meetings_router.delete("/{meeting_id}", response_model=BaseResponse[None])
async def delete_meeting(
    meeting_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_meeting(db, current_user.id, meeting_id)
    return BaseResponse(success=True, message="Meeting deleted successfully")


@meetings_router.put("/{meeting_id}/minutes", response_model=BaseResponse[MeetingResponse])
async def save_meeting_minutes(
    meeting_id: UUID,
    data: MeetingMinutesUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Save the transcript and summary of a meeting."""
    meeting = await services.save_meeting_minutes(db, current_user.id, meeting_id, data)
    return BaseResponse(
        success=True,
        message="Meeting minutes saved",
        data=MeetingResponse.model_validate(meeting),
    )


@meetings_router.post(
    "/{meeting_id}/process", response_model=BaseResponse[MeetingProcessingResponse]
)
async def process_meeting(
    meeting_id: UUID,
    data: MeetingProcessRequest,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    client: WebhookClient,
):
    """Summarise a meeting with AI and turn its action items into inbox tasks."""
    meeting, action_items = await services.process_meeting_with_ai(
        db, current_user.id, meeting_id, client, transcript=data.transcript
    )
    return BaseResponse(
        success=True,
        message=f"{len(action_items)} action items created",
        data=MeetingProcessingResponse(
            meeting=MeetingResponse.model_validate(meeting),
            action_items=[
                MeetingActionItemResponse.model_validate(a) for a in action_items
            ],
        ),
    )


@meetings_router.get(
    "/{meeting_id}/action-items",
    response_model=BaseResponse[list[MeetingActionItemResponse]],
)
async def list_action_items(
    meeting_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    action_items = await services.get_action_items(db, current_user.id, meeting_id)
    return BaseResponse(
        success=True,
        data=[MeetingActionItemResponse.model_validate(a) for a in action_items],
    )


@meetings_router.patch(
    "/action-items/{action_item_id}",
    response_model=BaseResponse[MeetingActionItemResponse],
)
async def update_action_item(
    action_item_id: UUID,
    data: MeetingActionItemUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Complete or reopen an action item together with its inbox task."""
    action_item = await services.set_action_item_status(
        db, current_user.id, action_item_id, data.status
    )
    return BaseResponse(
        success=True, data=MeetingActionItemResponse.model_validate(action_item)
    )


# ----- Goals -----


@goals_router.get("", response_model=BaseResponse[list[GoalResponse]])
async def list_goals(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    timeframe: GoalTimeframe | None = Query(None),
    status: GoalStatus | None = Query(None),
    area: GoalArea | None = Query(None),
    year: int | None = Query(None),
):
    """Get goals filtered by horizon, status, area or year."""
    goals = await crud.goals.get_all(
        db,
        current_user.id,
        filters={
            "timeframe": timeframe.value if timeframe else None,
            "status": status.value if status else None,
            "area": area.value if area else None,
            "year": year,
        },
    )
    return BaseResponse(success=True, data=[GoalResponse.model_validate(g) for g in goals])


@goals_router.get("/{goal_id}", response_model=BaseResponse[GoalResponse])
async def get_goal(
    goal_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    goal = await services.get_goal(db, current_user.id, goal_id)
    return BaseResponse(success=True, data=GoalResponse.model_validate(goal))


@goals_router.post("", response_model=BaseResponse[GoalResponse])
async def create_goal(
    data: GoalCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a goal in the current year, quarter, month or week."""
    goal = await services.create_goal(db, current_user.id, data, local_today())
    return BaseResponse(
        success=True,
        message="Goal created successfully",
        data=GoalResponse.model_validate(goal),
    )


@goals_router.patch("/{goal_id}", response_model=BaseResponse[GoalResponse])
async def update_goal(
    goal_id: UUID,
    data: GoalUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    goal = await services.update_goal(db, current_user.id, goal_id, data)
    return BaseResponse(
        success=True,
        message="Goal updated successfully",
        data=GoalResponse.model_validate(goal),
    )


@goals_router.put("/{goal_id}/progress", response_model=BaseResponse[GoalResponse])
async def update_goal_progress(
    goal_id: UUID,
    data: GoalProgressUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Record the current value of a measurable goal."""
    goal = await services.update_goal_progress(
        db, current_user.id, goal_id, data.current_value
    )
    return BaseResponse(success=True, data=GoalResponse.model_validate(goal))


@goals_router.delete("/{goal_id}", response_model=BaseResponse[None])
async def delete_goal(
    goal_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_goal(db, current_user.id, goal_id)
    return BaseResponse(success=True, message="Goal deleted successfully")


# ----- Tickets -----


@tickets_router.get("", response_model=BaseResponse[PaginatedResponse[TicketResponse]])
async def list_tickets(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: TicketStatus | None = Query(None),
    priority: TicketPriority | None = Query(None),
    property_id: UUID | None = Query(None),
    search: str | None = Query(None),
):
    """Get property tickets with pagination and filtering."""
    tickets, total = await crud.tickets.get_multi(
        db,
        current_user.id,
        pagination=PaginationParams(page=page, page_size=page_size),
        search_query=search,
        filters={
            "status": status.value if status else None,
            "priority": priority.value if priority else None,
            "property_id": property_id,
        },
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[TicketResponse.model_validate(t) for t in tickets],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@tickets_router.get("/{ticket_id}", response_model=BaseResponse[TicketResponse])
async def get_ticket(
    ticket_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    ticket = await services.get_ticket(db, current_user.id, ticket_id)
    return BaseResponse(success=True, data=TicketResponse.model_validate(ticket))


@tickets_router.post("", response_model=BaseResponse[TicketResponse])
async def create_ticket(
    data: TicketCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    ticket = await services.create_ticket(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Ticket created successfully",
        data=TicketResponse.model_validate(ticket),
    )


@tickets_router.patch("/{ticket_id}", response_model=BaseResponse[TicketResponse])
async def update_ticket(
    ticket_id: UUID,
    data: TicketUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a ticket; closing it stamps resolved_at."""
    ticket = await services.update_ticket(db, current_user.id, ticket_id, data)
    return BaseResponse(
        success=True,
        message="Ticket updated successfully",
        data=TicketResponse.model_validate(ticket),
    )


@tickets_router.delete("/{ticket_id}", response_model=BaseResponse[None])
async def delete_ticket(
    ticket_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_ticket(db, current_user.id, ticket_id)
    return BaseResponse(success=True, message="Ticket deleted successfully")
