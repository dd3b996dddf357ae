"""Tests for habits, streaks and the daily log."""

import uuid
from datetime import date, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from lifeos_backend.core.exceptions import NotFoundError
from lifeos_backend.modules.health import services
from lifeos_backend.modules.health.models import HabitLog
from lifeos_backend.modules.health.schemas import DailyLogUpsert, HabitCreate, HabitUpdate

TODAY = date(2026, 10, 16)


def days_ago(*offsets):
    return [TODAY - timedelta(days=n) for n in offsets]


@pytest.mark.parametrize(
    "completed, expected",
    [
        ([], 0),
        (days_ago(0), 1),
        (days_ago(0, 1, 2), 3),
        (days_ago(1, 2, 3, 4), 4),
        (days_ago(2, 3), 0),
        (days_ago(0, 1, 3, 4, 5), 2),
        (days_ago(5, 0, 2, 1), 3),
    ],
)
def test_count_streak(completed, expected):
    assert services.count_streak(completed, TODAY) == expected


class TestSchemas:
    def test_habit_name_required(self):
        with pytest.raises(PydanticValidationError):
            HabitCreate(name="   ")

    def test_habit_defaults_to_daily(self):
        assert HabitCreate(name="Meditieren").frequency.value == "täglich"

    @pytest.mark.parametrize(
        "field, value",
        [("mood", 0), ("mood", 11), ("energy", 12), ("weight", 19), ("water_ml", 0)],
    )
    def test_daily_log_bounds(self, field, value):
        with pytest.raises(PydanticValidationError):
            DailyLogUpsert(**{field: value})


class TestHabits:
    async def test_toggle_creates_then_updates_log(self, db_session, user_id):
        habit = await services.create_habit(
            db_session, user_id, HabitCreate(name="Wasser trinken", unit="ml")
        )

        log = await services.toggle_habit(db_session, user_id, habit.id, TODAY, True, 2000)
        assert log.is_completed is True
        assert log.value == 2000

        again = await services.toggle_habit(db_session, user_id, habit.id, TODAY, False)
        assert again.id == log.id
        assert again.is_completed is False
        assert again.value == 2000

        corrected = await services.toggle_habit(
            db_session, user_id, habit.id, TODAY, True, 2500
        )
        assert corrected.value == 2500

    async def test_toggle_unknown_habit(self, db_session, user_id):
        with pytest.raises(NotFoundError):
            await services.toggle_habit(db_session, user_id, uuid.uuid4(), TODAY, True)

    async def test_habits_for_day_merges_logs(self, db_session, user_id):
        read = await services.create_habit(
            db_session, user_id, HabitCreate(name="Lesen", sort_order=2)
        )
        run = await services.create_habit(
            db_session, user_id, HabitCreate(name="Laufen", sort_order=1)
        )
        paused = await services.create_habit(
            db_session, user_id, HabitCreate(name="Kalt duschen", sort_order=0)
        )
        await services.update_habit(
            db_session, user_id, paused.id, HabitUpdate(is_active=False)
        )
        await services.toggle_habit(db_session, user_id, run.id, TODAY, True)
        await services.toggle_habit(
            db_session, user_id, read.id, TODAY - timedelta(days=1), True
        )

        habits = await services.get_habits_for_day(db_session, user_id, TODAY)

        assert [h.name for h in habits] == ["Laufen", "Lesen"]
        assert habits[0].is_completed is True
        assert habits[0].today_log is not None
        assert habits[1].is_completed is False
        assert habits[1].today_log is None

    async def test_streak_from_logs(self, db_session, user_id):
        habit = await services.create_habit(
            db_session, user_id, HabitCreate(name="Journaling")
        )
        for offset, completed in [(1, True), (2, True), (3, False), (4, True)]:
            db_session.add(
                HabitLog(
                    user_id=user_id,
                    habit_id=habit.id,
                    date=TODAY - timedelta(days=offset),
                    is_completed=completed,
                )
            )
        await db_session.commit()

        streak = await services.get_habit_streak(db_session, user_id, habit.id, TODAY)

        assert streak.current_streak == 2
        assert streak.last_completed == TODAY - timedelta(days=1)


class TestDailyLog:
    async def test_upsert_merges_fields(self, db_session, user_id):
        first = await services.upsert_daily_log(
            db_session, user_id, TODAY, DailyLogUpsert(mood=7, weight=82.4)
        )
        second = await services.upsert_daily_log(
            db_session, user_id, TODAY, DailyLogUpsert(energy=6, notes="  ")
        )

        assert second.id == first.id
        assert second.mood == 7
        assert second.energy == 6
        assert second.weight == pytest.approx(82.4)
        assert second.notes is None

    async def test_days_are_separate(self, db_session, user_id):
        today = await services.upsert_daily_log(
            db_session, user_id, TODAY, DailyLogUpsert(water_ml=1500)
        )
        yesterday = await services.upsert_daily_log(
            db_session, user_id, TODAY - timedelta(days=1), DailyLogUpsert(water_ml=800)
        )

        assert today.id != yesterday.id
        assert today.water_ml == 1500
