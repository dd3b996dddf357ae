"""Tests for dashboard insights, quick stats and the today overview."""

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from lifeos_backend.core.exceptions import NotFoundError
from lifeos_backend.modules.dashboard import services
from lifeos_backend.modules.dashboard.models import AIInsight
from lifeos_backend.modules.health.models import GarminDailyStats
from lifeos_backend.modules.productivity.models import Goal, InboxItem, Ticket
from lifeos_backend.modules.wealth.models import DailySnapshot, UserPreferences

TODAY = date(2026, 10, 16)
BASE_TIME = datetime(2026, 10, 16, 6, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_insight(db_session, user_id):
    """Persist an insight created ``minutes`` after BASE_TIME."""

    async def _factory(title, priority="info", minutes=0, **overrides):
        values = {
            "user_id": user_id,
            "type": "test",
            "title": title,
            "message": f"{title} message",
            "priority": priority,
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        }
        values.update(overrides)
        insight = AIInsight(**values)
        db_session.add(insight)
        await db_session.commit()
        return insight

    return _factory


def test_sort_by_priority_is_stable():
    insights = [
        AIInsight(title="a", priority="info"),
        AIInsight(title="b", priority="action_required"),
        AIInsight(title="c", priority="custom"),
        AIInsight(title="d", priority="warning"),
        AIInsight(title="e", priority="action_required"),
    ]

    ordered = services.sort_by_priority(insights)

    assert [i.title for i in ordered] == ["b", "e", "d", "a", "c"]


class TestInsights:
    async def test_pending_insights_selection_and_order(self, db_session, user_id, make_insight):
        await make_insight("neu info", "info", minutes=5)
        await make_insight("neu warnung", "warning", minutes=1)
        await make_insight("gelesen info", "info", minutes=9, is_read=True)
        await make_insight("gelesen offen", "action_required", minutes=2, is_read=True)
        await make_insight(
            "erledigt", "action_required", minutes=8, is_read=True, is_actioned=True
        )

        insights = await services.get_pending_insights(db_session, user_id)

        assert [i.title for i in insights] == ["gelesen offen", "neu warnung", "neu info"]

    async def test_pending_insights_limit(self, db_session, user_id, make_insight):
        for n in range(12):
            await make_insight(f"insight {n}", minutes=n)

        insights = await services.get_pending_insights(db_session, user_id, limit=10)

        assert len(insights) == 10
        assert insights[0].title == "insight 11"

    async def test_alerts_newest_first(self, db_session, user_id, make_insight):
        await make_insight("alt", "warning", minutes=0)
        await make_insight("neu", "action_required", minutes=10)
        await make_insight("info", "info", minutes=20)
        await make_insight("erledigt", "warning", minutes=30, is_actioned=True)

        alerts = await services.get_alerts(db_session, user_id)

        assert [a.title for a in alerts] == ["neu", "alt"]

    async def test_mark_actioned_implies_read(self, db_session, user_id, make_insight):
        insight = await make_insight("Kredit prüfen", "action_required")

        updated = await services.mark_insight_actioned(
            db_session, user_id, insight.id, "Bank angerufen"
        )

        assert updated.is_read is True
        assert updated.is_actioned is True
        assert updated.action_taken == "Bank angerufen"
        assert await services.get_alerts(db_session, user_id) == []

    async def test_mark_read_foreign_insight(self, db_session, user_id, make_insight):
        insight = await make_insight("fremd", user_id=uuid.uuid4())

        with pytest.raises(NotFoundError):
            await services.mark_insight_read(db_session, user_id, insight.id)


class TestQuickStats:
    async def test_empty_account(self, db_session, user_id):
        stats = await services.get_quick_stats(db_session, user_id, TODAY)

        assert stats.net_worth == 0
        assert stats.inbox_count == 0
        assert stats.fire_progress == 0
        assert stats.fire_target == 0

    async def test_counts_and_fire(self, db_session, user_id):
        db_session.add_all(
            [
                DailySnapshot(user_id=user_id, date=TODAY - timedelta(days=1),
                              net_worth=100000, total_assets=150000),
                DailySnapshot(user_id=user_id, date=TODAY, net_worth=250000,
                              total_assets=400000, total_liabilities=150000,
                              cash_value=20000, investment_value=80000,
                              property_value=300000),
                UserPreferences(user_id=user_id, fire_target_amount=1000000),
                InboxItem(user_id=user_id, title="offen", status="inbox"),
                InboxItem(user_id=user_id, title="überfällig", status="next",
                          due_date=TODAY - timedelta(days=2)),
                InboxItem(user_id=user_id, title="erledigt", status="done",
                          due_date=TODAY - timedelta(days=2)),
                Ticket(user_id=user_id, title="Heizung", status="neu"),
                Ticket(user_id=user_id, title="Fenster", status="abgeschlossen"),
                Goal(user_id=user_id, title="Sparen", timeframe="yearly",
                     status="in_progress"),
                Goal(user_id=user_id, title="Laufen", timeframe="yearly",
                     status="completed"),
            ]
        )
        await db_session.commit()

        stats = await services.get_quick_stats(db_session, user_id, TODAY)

        assert stats.net_worth == 250000
        assert stats.total_liabilities == 150000
        assert stats.property_value == 300000
        assert stats.inbox_count == 2
        assert stats.overdue_count == 1
        assert stats.open_tickets == 1
        assert stats.active_goals == 1
        assert stats.fire_progress == pytest.approx(25.0)
        assert stats.fire_target == 1000000


async def test_today_overview(db_session, user_id, make_insight):
    db_session.add_all(
        [
            GarminDailyStats(user_id=user_id, date=TODAY, sleep_score=81, steps=9500),
            InboxItem(user_id=user_id, title="Heute erledigen", status="today"),
        ]
    )
    await db_session.commit()
    await make_insight("Leerstand", "warning")

    overview = await services.get_today_overview(db_session, user_id, TODAY)

    assert overview.date == TODAY
    assert overview.garmin.sleep_score == 81
    assert overview.readiness is None
    assert overview.daily_log is None
    assert overview.habits == []
    assert overview.habits_completed == 0
    assert [t.title for t in overview.tasks] == ["Heute erledigen"]
    assert [i.title for i in overview.insights] == ["Leerstand"]
    assert [a.title for a in overview.alerts] == ["Leerstand"]
    assert overview.quick_stats.inbox_count == 1
