"""Productivity module for Life OS.

GTD inbox, meetings with AI-extracted action items, goals and property
tickets.
"""

from .models import (
    ActionItemStatus,
    Goal,
    GoalArea,
    GoalStatus,
    GoalTimeframe,
    InboxItem,
    InboxSource,
    InboxStatus,
    Meeting,
    MeetingActionItem,
    Priority,
    Ticket,
    TicketPriority,
    TicketStatus,
)
from .routers import goals_router, inbox_router, meetings_router, tickets_router

__all__ = [
    # Models
    "InboxItem",
    "Meeting",
    "MeetingActionItem",
    "Goal",
    "Ticket",
    # Enums
    "ActionItemStatus",
    "GoalArea",
    "GoalStatus",
    "GoalTimeframe",
    "InboxSource",
    "InboxStatus",
    "Priority",
    "TicketPriority",
    "TicketStatus",
    # Routers
    "inbox_router",
    "meetings_router",
    "goals_router",
    "tickets_router",
]
