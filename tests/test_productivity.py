"""Tests for the productivity schemas and services."""

import json
import uuid
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import httpx
import pytest
from pydantic import ValidationError as PydanticValidationError

from lifeos_backend.core.exceptions import (
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from lifeos_backend.modules.automation.client import N8nWebhookClient
from lifeos_backend.modules.productivity import services
from lifeos_backend.modules.productivity.models import (
    ActionItemStatus,
    GoalTimeframe,
    InboxItem,
    InboxSource,
    InboxStatus,
)
from lifeos_backend.modules.productivity.schemas import (
    GoalCreate,
    GoalUpdate,
    InboxItemCreate,
    InboxItemUpdate,
    MeetingCreate,
    MeetingMinutesUpdate,
    MeetingUpdate,
    TicketCreate,
    TicketUpdate,
)

BERLIN = ZoneInfo("Europe/Berlin")
UTC = timezone.utc
TODAY = date(2026, 10, 16)


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------

class TestSchemas:
    def test_task_title_is_trimmed(self):
        item = InboxItemCreate(title="  Steuererklärung  ")
        assert item.title == "Steuererklärung"

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_task_title_required(self, title):
        with pytest.raises(PydanticValidationError, match="Title is required"):
            InboxItemCreate(title=title)

    def test_goal_title_minimum_length(self):
        with pytest.raises(PydanticValidationError, match="at least 3 characters"):
            GoalCreate(title="ab", timeframe="yearly")

    def test_goal_end_date_not_before_start(self):
        with pytest.raises(PydanticValidationError, match="End date must not precede"):
            GoalCreate(
                title="Marathon laufen",
                timeframe="yearly",
                start_date=date(2026, 6, 1),
                end_date=date(2026, 5, 1),
            )

    @pytest.mark.parametrize("target", [0, -5])
    def test_goal_target_positive(self, target):
        with pytest.raises(PydanticValidationError, match="positive number"):
            GoalCreate(title="Sparen", timeframe="monthly", target_value=target)

    def test_blank_optional_strings_become_none(self):
        goal = GoalCreate(title="Sparen", timeframe="monthly", description="  ", unit="")
        assert goal.description is None
        assert goal.unit is None

    def test_meeting_duration(self):
        meeting = MeetingCreate(
            title="Jour fixe",
            start_time=datetime(2026, 10, 16, 9, 0, tzinfo=BERLIN),
            end_time=datetime(2026, 10, 16, 10, 30, tzinfo=BERLIN),
        )
        assert meeting.duration_minutes == 90

    def test_meeting_end_before_start(self):
        with pytest.raises(PydanticValidationError, match="End time must not precede"):
            MeetingCreate(
                title="Jour fixe",
                start_time=datetime(2026, 10, 16, 9, 0, tzinfo=BERLIN),
                end_time=datetime(2026, 10, 16, 8, 0, tzinfo=BERLIN),
            )

    def test_meeting_start_required(self):
        with pytest.raises(PydanticValidationError):
            MeetingCreate(title="Jour fixe")


def test_goal_period_per_timeframe():
    assert services.goal_period(GoalTimeframe.YEARLY, TODAY) == {
        "year": 2026, "quarter": None, "month": None, "week": None,
    }
    assert services.goal_period(GoalTimeframe.QUARTERLY, TODAY)["quarter"] == 4
    assert services.goal_period(GoalTimeframe.MONTHLY, TODAY)["month"] == 10
    assert services.goal_period(GoalTimeframe.WEEKLY, TODAY)["week"] == 42


@pytest.mark.parametrize(
    "current, target, expected",
    [(50, 200, 25.0), (300, 200, 100.0), (10, None, None), (10, 0, None)],
)
def test_goal_progress(current, target, expected):
    assert services.goal_progress(current, target) == expected


# ---------------------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------------------

async def _add_item(db_session, user_id, **values):
    item = InboxItem(user_id=user_id, **values)
    db_session.add(item)
    await db_session.commit()
    return item


class TestInbox:
    async def test_today_tasks_filter_and_order(self, db_session, user_id):
        await _add_item(db_session, user_id, title="due", status="next",
                        due_date=TODAY, priority=3)
        await _add_item(db_session, user_id, title="scheduled", status="scheduled",
                        scheduled_date=TODAY, priority=1)
        await _add_item(db_session, user_id, title="flagged", status="today",
                        priority=None)
        await _add_item(db_session, user_id, title="done", status="done",
                        due_date=TODAY, priority=1)
        await _add_item(db_session, user_id, title="delegated", status="delegated",
                        due_date=TODAY, priority=1)
        await _add_item(db_session, user_id, title="tomorrow", status="next",
                        due_date=TODAY + timedelta(days=1), priority=1)

        tasks = await services.get_today_tasks(db_session, user_id, TODAY)

        assert [t.title for t in tasks] == ["scheduled", "due", "flagged"]

    async def test_today_tasks_limit(self, db_session, user_id):
        for i in range(12):
            await _add_item(db_session, user_id, title=f"task {i}", status="today",
                            priority=2)

        tasks = await services.get_today_tasks(db_session, user_id, TODAY)

        assert len(tasks) == 10

    async def test_other_users_items_are_invisible(self, db_session, user_id):
        item = await _add_item(db_session, uuid.uuid4(), title="fremd", status="today")

        with pytest.raises(NotFoundError):
            await services.get_inbox_item(db_session, user_id, item.id)
        assert await services.get_today_tasks(db_session, user_id, TODAY) == []

    async def test_completing_sets_completed_at(self, db_session, user_id):
        item = await services.create_inbox_item(
            db_session, user_id, InboxItemCreate(title="Rechnung zahlen")
        )
        assert item.completed_at is None
        assert item.status == InboxStatus.INBOX.value

        done = await services.update_inbox_item(
            db_session, user_id, item.id, InboxItemUpdate(status="done")
        )
        assert done.completed_at is not None

        reopened = await services.update_inbox_item(
            db_session, user_id, item.id, InboxItemUpdate(status="next")
        )
        assert reopened.completed_at is None


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

class TestGoals:
    async def test_create_fills_period(self, db_session, user_id):
        goal = await services.create_goal(
            db_session,
            user_id,
            GoalCreate(title="10 Bücher lesen", timeframe="quarterly", target_value=10),
            TODAY,
        )

        assert goal.year == 2026
        assert goal.quarter == 4
        assert goal.month is None
        assert goal.current_value == 0
        assert goal.progress_percent == 0

    async def test_progress_update_is_capped(self, db_session, user_id):
        goal = await services.create_goal(
            db_session,
            user_id,
            GoalCreate(title="Sparquote", timeframe="monthly", target_value=1000),
            TODAY,
        )

        goal = await services.update_goal_progress(db_session, user_id, goal.id, 250)
        assert goal.progress_percent == pytest.approx(25.0)

        goal = await services.update_goal_progress(db_session, user_id, goal.id, 1500)
        assert goal.progress_percent == 100.0

    async def test_clearing_target_clears_progress(self, db_session, user_id):
        goal = await services.create_goal(
            db_session,
            user_id,
            GoalCreate(title="Marathon", timeframe="yearly", target_value=42),
            TODAY,
        )
        goal = await services.update_goal_progress(db_session, user_id, goal.id, 21)
        assert goal.progress_percent == pytest.approx(50.0)

        goal = await services.update_goal(
            db_session, user_id, goal.id, GoalUpdate(target_value=None)
        )

        assert goal.target_value is None
        assert goal.progress_percent is None

    async def test_update_rejects_end_before_stored_start(self, db_session, user_id):
        goal = await services.create_goal(
            db_session,
            user_id,
            GoalCreate(title="Umzug", timeframe="yearly", start_date=date(2026, 3, 1)),
            TODAY,
        )

        with pytest.raises(ValidationError):
            await services.update_goal(
                db_session, user_id, goal.id, GoalUpdate(end_date=date(2026, 2, 1))
            )

    async def test_unknown_parent_goal(self, db_session, user_id):
        with pytest.raises(NotFoundError):
            await services.create_goal(
                db_session,
                user_id,
                GoalCreate(title="Teilziel", timeframe="weekly", parent_goal_id=uuid.uuid4()),
                TODAY,
            )


# ---------------------------------------------------------------------------
# Meetings
# ---------------------------------------------------------------------------

def _meeting_data(**overrides):
    values = {
        "title": "Eigentümerversammlung",
        "start_time": datetime(2026, 10, 16, 18, 0, tzinfo=UTC),
        "end_time": datetime(2026, 10, 16, 19, 15, tzinfo=UTC),
        "attendees": [{"name": "Verwalter", "email": "hv@example.com"}],
    }
    values.update(overrides)
    return MeetingCreate(**values)


def _n8n_client(handler):
    return N8nWebhookClient(
        base_url="http://n8n.test/webhook", transport=httpx.MockTransport(handler)
    )


class TestMeetings:
    async def test_create_stores_duration_and_attendees(self, db_session, user_id):
        meeting = await services.create_meeting(db_session, user_id, _meeting_data())

        assert meeting.duration_minutes == 75
        assert meeting.attendees == [
            {"name": "Verwalter", "email": "hv@example.com", "response_status": None}
        ]
        assert meeting.source == InboxSource.MANUAL.value

    async def test_update_recomputes_duration(self, db_session, user_id):
        meeting = await services.create_meeting(db_session, user_id, _meeting_data())

        updated = await services.update_meeting(
            db_session,
            user_id,
            meeting.id,
            MeetingUpdate(end_time=datetime(2026, 10, 16, 20, 0, tzinfo=UTC)),
        )

        assert updated.duration_minutes == 120

    async def test_update_rejects_end_before_start(self, db_session, user_id):
        meeting = await services.create_meeting(db_session, user_id, _meeting_data())

        with pytest.raises(ValidationError):
            await services.update_meeting(
                db_session,
                user_id,
                meeting.id,
                MeetingUpdate(end_time=datetime(2026, 10, 16, 17, 0, tzinfo=UTC)),
            )

    async def test_meetings_of_local_day(self, db_session, user_id):
        await services.create_meeting(db_session, user_id, _meeting_data(title="heute"))
        await services.create_meeting(
            db_session,
            user_id,
            _meeting_data(
                title="morgen",
                start_time=datetime(2026, 10, 17, 9, 30, tzinfo=UTC),
                end_time=None,
            ),
        )

        meetings = await services.get_meetings_on(db_session, user_id, TODAY)

        assert [m.title for m in meetings] == ["heute"]

    async def test_save_minutes(self, db_session, user_id):
        meeting = await services.create_meeting(db_session, user_id, _meeting_data())

        saved = await services.save_meeting_minutes(
            db_session,
            user_id,
            meeting.id,
            MeetingMinutesUpdate(transcript="Dach wird saniert.", summary="  "),
        )

        assert saved.transcript == "Dach wird saniert."
        assert saved.summary is None

    async def test_process_rejects_empty_transcript(self, db_session, user_id):
        meeting = await services.create_meeting(db_session, user_id, _meeting_data())

        def handler(request):
            raise AssertionError("n8n must not be called")

        with pytest.raises(ValidationError, match="empty"):
            await services.process_meeting_with_ai(
                db_session, user_id, meeting.id, _n8n_client(handler), transcript="   "
            )

    async def test_process_creates_tasks_from_action_items(self, db_session, user_id):
        meeting = await services.create_meeting(db_session, user_id, _meeting_data())
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "summary": "Dachsanierung beschlossen.",
                    "action_items": [
                        {"title": "Angebote einholen", "assigned_to": "Verwalter",
                         "due_date": "2026-11-01", "priority": 1},
                        {"title": "Rücklage prüfen"},
                    ],
                },
            )

        meeting, action_items = await services.process_meeting_with_ai(
            db_session,
            user_id,
            meeting.id,
            _n8n_client(handler),
            transcript="Dach undicht, Sanierung beschlossen.",
        )

        assert str(requests[0].url) == "http://n8n.test/webhook/process-meeting-minutes"
        sent = json.loads(requests[0].content)
        assert sent["meeting_id"] == str(meeting.id)
        assert sent["transcript"] == "Dach undicht, Sanierung beschlossen."

        assert meeting.summary == "Dachsanierung beschlossen."
        assert meeting.transcript == "Dach undicht, Sanierung beschlossen."
        assert len(action_items) == 2
        assert all(a.status == ActionItemStatus.PENDING.value for a in action_items)

        first = await services.get_inbox_item(
            db_session, user_id, action_items[0].inbox_item_id
        )
        assert first.title == "Angebote einholen"
        assert first.source == InboxSource.MEETING.value
        assert first.priority == 1
        assert first.due_date == date(2026, 11, 1)

        stored = await services.get_action_items(db_session, user_id, meeting.id)
        assert len(stored) == 2

    async def test_process_propagates_n8n_failure(self, db_session, user_id):
        meeting = await services.create_meeting(db_session, user_id, _meeting_data())

        def handler(request):
            return httpx.Response(500, json={"message": "boom"})

        with pytest.raises(ExternalServiceError):
            await services.process_meeting_with_ai(
                db_session, user_id, meeting.id, _n8n_client(handler), transcript="Notiz"
            )

    async def test_completing_action_item_closes_task(self, db_session, user_id):
        meeting = await services.create_meeting(db_session, user_id, _meeting_data())

        def handler(request):
            return httpx.Response(200, json={"action_items": [{"title": "Protokoll"}]})

        _, action_items = await services.process_meeting_with_ai(
            db_session, user_id, meeting.id, _n8n_client(handler), transcript="Notiz"
        )

        item = await services.set_action_item_status(
            db_session, user_id, action_items[0].id, ActionItemStatus.COMPLETED
        )
        task = await services.get_inbox_item(db_session, user_id, item.inbox_item_id)

        assert item.status == "completed"
        assert task.status == InboxStatus.DONE.value
        assert task.completed_at is not None


# ---------------------------------------------------------------------------
# Tickets
# ---------------------------------------------------------------------------

async def test_closing_ticket_sets_resolved_at(db_session, user_id):
    ticket = await services.create_ticket(
        db_session, user_id, TicketCreate(title="Heizung defekt", priority="hoch")
    )
    assert ticket.status == "neu"
    assert ticket.resolved_at is None

    ticket = await services.update_ticket(
        db_session, user_id, ticket.id, TicketUpdate(status="abgeschlossen")
    )

    assert ticket.resolved_at is not None
