"""Fitness business logic services."""

from collections.abc import Iterable
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from ...core.logging import get_logger
from ..health.models import DailyLog, GarminDailyStats
from . import crud
from .models import (
    BodyTracking,
    DailySupplementTracking,
    FitnessHabit,
    FitnessHabitLog,
    FitnessHabitType,
    SupplementPeptideLog,
    TrainingSession,
    TrainingSet,
)
from .protocol import build_checklist, find_slot
from .schemas import (
    BodyTrackingUpsert,
    ExerciseSets,
    FitnessHabitCreate,
    FitnessHabitDay,
    FitnessHabitResponse,
    FitnessHabitStatus,
    PersonalRecord,
    SubstanceLogCreate,
    SupplementChecklist,
    TrainingDay,
    TrainingSessionResponse,
    TrainingSessionUpsert,
    TrainingSetCreate,
    TrainingSetResponse,
    WeeklyUpdate,
)

logger = get_logger(__name__)


# ----- Supplement checklist -----


async def get_supplement_checklist(
    db: AsyncSession, user_id: UUID, day: date
) -> SupplementChecklist:
    entries = await crud.get_supplement_entries(db, user_id, day)
    return build_checklist(day, entries)


def _protocol_slot(slot_name: str):
    slot = find_slot(slot_name)
    if slot is None:
        raise ValidationError(f"Unknown slot '{slot_name}'", field="slot_name")
    return slot


async def _write_slot(
    db: AsyncSession,
    user_id: UUID,
    day: date,
    slot_name: str,
    supplement_names: Iterable[str],
    taken: bool | None = None,
    notes: str | None = None,
    set_notes: bool = False,
) -> None:
    """Upsert tracking rows of one slot; ``None`` leaves ``taken`` as stored."""
    existing = {
        e.supplement_name: e
        for e in await crud.get_supplement_entries(db, user_id, day, slot_name)
    }
    slot_notes = next((e.notes for e in existing.values() if e.notes), None)

    for name in supplement_names:
        entry = existing.get(name)
        if entry is None:
            entry = DailySupplementTracking(
                user_id=user_id,
                date=day,
                slot_name=slot_name,
                supplement_name=name,
                taken=False,
                notes=slot_notes,
            )
            db.add(entry)
        if taken is not None:
            entry.taken = taken
        if set_notes:
            entry.notes = notes

    await db.commit()


async def set_supplement_taken(
    db: AsyncSession,
    user_id: UUID,
    day: date,
    slot_name: str,
    supplement_name: str,
    taken: bool,
) -> SupplementChecklist:
    slot = _protocol_slot(slot_name)
    if supplement_name not in [s.name for s in slot.supplements]:
        raise ValidationError(
            f"'{supplement_name}' is not part of slot '{slot_name}'",
            field="supplement_name",
        )
    await _write_slot(db, user_id, day, slot_name, [supplement_name], taken=taken)
    return await get_supplement_checklist(db, user_id, day)


async def complete_slot(
    db: AsyncSession, user_id: UUID, day: date, slot_name: str
) -> SupplementChecklist:
    """Mark every supplement of a slot, optional ones included, as taken."""
    slot = _protocol_slot(slot_name)
    await _write_slot(
        db, user_id, day, slot_name, [s.name for s in slot.supplements], taken=True
    )
    return await get_supplement_checklist(db, user_id, day)


async def save_slot_notes(
    db: AsyncSession, user_id: UUID, day: date, slot_name: str, notes: str | None
) -> SupplementChecklist:
    """Store the notes on every supplement of a slot, keeping what was taken."""
    slot = _protocol_slot(slot_name)
    await _write_slot(
        db,
        user_id,
        day,
        slot_name,
        [s.name for s in slot.supplements],
        notes=notes,
        set_notes=True,
    )
    return await get_supplement_checklist(db, user_id, day)


# ----- Substance log -----


async def list_substance_log(
    db: AsyncSession, user_id: UUID, day: date
) -> list[SupplementPeptideLog]:
    return await crud.substance_logs.get_all(db, user_id, filters={"date": day})


async def add_substance_entry(
    db: AsyncSession, user_id: UUID, data: SubstanceLogCreate, day: date
) -> SupplementPeptideLog:
    values = data.model_dump(exclude={"date"})
    values["date"] = data.date or day
    return await crud.substance_logs.create(db, values, user_id)


async def delete_substance_entry(db: AsyncSession, user_id: UUID, entry_id: UUID) -> None:
    entry = await crud.substance_logs.get(db, user_id, entry_id)
    if not entry:
        raise NotFoundError(f"Substance log entry with ID {entry_id} not found")
    await crud.substance_logs.delete(db, entry)


# ----- Training -----


def set_score(weight_kg: float | None, reps: int | None) -> float:
    return (weight_kg or 0) * (reps or 0)


def group_sets_by_exercise(sets: Iterable[TrainingSet]) -> list[ExerciseSets]:
    """Group sets by exercise, keeping the order the sets arrive in."""
    groups: dict[str, list[TrainingSetResponse]] = {}
    for training_set in sets:
        groups.setdefault(training_set.exercise_name, []).append(
            TrainingSetResponse.model_validate(training_set)
        )
    return [ExerciseSets(exercise_name=name, sets=s) for name, s in groups.items()]


def best_sets(sets: Iterable[TrainingSet]) -> list[PersonalRecord]:
    """Best set per exercise by weight times reps, sorted by exercise."""
    best: dict[str, PersonalRecord] = {}
    for training_set in sets:
        score = set_score(training_set.weight_kg, training_set.reps)
        current = best.get(training_set.exercise_name)
        if current is None or score > current.score:
            best[training_set.exercise_name] = PersonalRecord(
                exercise_name=training_set.exercise_name,
                weight_kg=training_set.weight_kg or 0,
                reps=training_set.reps or 0,
                score=score,
            )
    return [best[name] for name in sorted(best)]


async def get_training_day(
    db: AsyncSession, user_id: UUID, day: date
) -> TrainingDay | None:
    session = await crud.get_training_session(db, user_id, day)
    if session is None:
        return None
    sets = await crud.get_sets_for_session(db, user_id, session.id)
    return TrainingDay(
        session=TrainingSessionResponse.model_validate(session),
        exercises=group_sets_by_exercise(sets),
    )


async def save_training_session(
    db: AsyncSession, user_id: UUID, day: date, data: TrainingSessionUpsert
) -> TrainingSession:
    """Create the session of a day or overwrite the stored one."""
    values = data.model_dump()
    session = await crud.get_training_session(db, user_id, day)
    if session:
        for field, value in values.items():
            setattr(session, field, value)
    else:
        session = TrainingSession(user_id=user_id, date=day, **values)
        db.add(session)

    await db.commit()
    await db.refresh(session)
    return session


async def add_training_set(
    db: AsyncSession, user_id: UUID, session_id: UUID, data: TrainingSetCreate
) -> TrainingSet:
    """Store a set; it is a PR when it beats every earlier set of the exercise."""
    session = await crud.training_sessions.get(db, user_id, session_id)
    if not session:
        raise NotFoundError(f"Training session with ID {session_id} not found")

    previous = await crud.get_scored_sets(db, user_id, data.exercise_name)
    record = max((set_score(s.weight_kg, s.reps) for s in previous), default=0)
    is_pr = set_score(data.weight_kg, data.reps) > record

    training_set = await crud.training_sets.create(
        db, data.model_dump(), user_id, session_id=session_id, is_pr=is_pr
    )
    if is_pr:
        logger.info(
            f"New record for {data.exercise_name}: {data.weight_kg} kg x {data.reps}"
        )
    return training_set


async def delete_training_set(db: AsyncSession, user_id: UUID, set_id: UUID) -> None:
    training_set = await crud.training_sets.get(db, user_id, set_id)
    if not training_set:
        raise NotFoundError(f"Training set with ID {set_id} not found")
    await crud.training_sets.delete(db, training_set)


async def get_personal_records(db: AsyncSession, user_id: UUID) -> list[PersonalRecord]:
    return best_sets(await crud.get_scored_sets(db, user_id))


# ----- Fitness habits -----


async def create_fitness_habit(
    db: AsyncSession, user_id: UUID, data: FitnessHabitCreate, day: date
) -> FitnessHabit:
    """Create a habit and log it as happened on ``day``."""
    if await crud.get_fitness_habit_by_name(db, user_id, data.habit_name):
        raise BusinessLogicError(f"Fitness habit '{data.habit_name}' already exists")

    habit = await crud.fitness_habits.create(db, data.model_dump(), user_id)
    await toggle_fitness_habit(db, user_id, habit.id, day, True)
    return habit


async def delete_fitness_habit(db: AsyncSession, user_id: UUID, habit_id: UUID) -> None:
    habit = await crud.fitness_habits.get(db, user_id, habit_id)
    if not habit:
        raise NotFoundError(f"Fitness habit with ID {habit_id} not found")
    await crud.fitness_habits.delete(db, habit)


async def toggle_fitness_habit(
    db: AsyncSession,
    user_id: UUID,
    habit_id: UUID,
    day: date,
    completed: bool | None = None,
) -> FitnessHabitLog:
    """Set a habit's state for a day, or flip it when ``completed`` is None."""
    if not await crud.fitness_habits.get(db, user_id, habit_id):
        raise NotFoundError(f"Fitness habit with ID {habit_id} not found")

    log = await crud.get_fitness_habit_log(db, user_id, habit_id, day)
    if log:
        log.completed = (not log.completed) if completed is None else completed
    else:
        log = FitnessHabitLog(
            user_id=user_id,
            habit_id=habit_id,
            date=day,
            completed=True if completed is None else completed,
        )
        db.add(log)

    await db.commit()
    await db.refresh(log)
    return log


def split_habits(
    day: date, habits: Iterable[FitnessHabit], logs: Iterable[FitnessHabitLog]
) -> FitnessHabitDay:
    done = {log.habit_id for log in logs if log.completed}
    good, bad = [], []
    for habit in habits:
        status = FitnessHabitStatus(
            **FitnessHabitResponse.model_validate(habit).model_dump(),
            completed=habit.id in done,
        )
        (good if habit.habit_type == FitnessHabitType.GOOD.value else bad).append(status)
    return FitnessHabitDay(
        date=day,
        good=good,
        bad=bad,
        good_completed=sum(1 for h in good if h.completed),
        bad_completed=sum(1 for h in bad if h.completed),
    )


async def get_fitness_habit_day(
    db: AsyncSession, user_id: UUID, day: date
) -> FitnessHabitDay:
    habits = await crud.fitness_habits.get_all(db, user_id)
    logs = await crud.get_fitness_habit_logs(db, user_id, day)
    return split_habits(day, habits, logs)


# ----- Body tracking -----


async def upsert_body_tracking(
    db: AsyncSession, user_id: UUID, day: date, data: BodyTrackingUpsert
) -> BodyTracking:
    """Merge the given measurements into the record of a day."""
    values = data.model_dump(exclude_unset=True)
    record = await crud.get_body_tracking(db, user_id, day)
    if record:
        for field, value in values.items():
            setattr(record, field, value)
    else:
        record = BodyTracking(user_id=user_id, date=day, **values)
        db.add(record)

    await db.commit()
    await db.refresh(record)
    return record


# ----- Weekly update -----


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def average(values: Iterable[float | None]) -> float | None:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def supplement_compliance(entries: Iterable[DailySupplementTracking]) -> float | None:
    """Required protocol supplements taken, over the days with any tracking."""
    by_day: dict[date, list[DailySupplementTracking]] = {}
    for entry in entries:
        by_day.setdefault(entry.date, []).append(entry)
    if not by_day:
        return None

    completed = total = 0
    for day, day_entries in by_day.items():
        progress = build_checklist(day, day_entries).progress
        completed += progress.completed
        total += progress.total
    return completed / total * 100 if total else None


def render_weekly_text(update: WeeklyUpdate, notes: str | None = None) -> str:
    """Plain text summary for the coach, ready to paste into a chat."""
    lines = [
        "=== WEEKLY UPDATE ===",
        f"Woche: KW {update.week_number} {update.year}",
        "",
        "📊 Gewicht:",
    ]
    if update.avg_weight_kg is not None:
        lines.append(f"- Durchschnitt: {update.avg_weight_kg:.1f} kg")
    else:
        lines.append("- Durchschnitt: Keine Daten")
    if update.weight_change_kg is not None:
        sign = "+" if update.weight_change_kg >= 0 else ""
        lines.append(f"- Veränderung: {sign}{update.weight_change_kg:.1f} kg")

    lines += ["", "✅ Compliance:", f"- Training: {update.training_sessions_completed} Einheiten"]
    if update.supplement_compliance_percent is not None:
        lines.append(f"- Supplements: {update.supplement_compliance_percent:.0f}%")

    lines += ["", "💪 Recovery:"]
    if update.sleep_avg_hours is not None:
        lines.append(f"- Schlaf: {update.sleep_avg_hours:.1f} Std (Ø)")
    if update.wellbeing_avg is not None:
        lines.append(f"- Wohlbefinden: {update.wellbeing_avg:.1f}/10")
    if update.energy_avg is not None:
        lines.append(f"- Energie: {update.energy_avg:.1f}/10")

    if notes and notes.strip():
        lines += ["", "📝 Bemerkungen:", notes.strip()]

    return "\n".join(lines) + "\n"


async def get_weekly_update(
    db: AsyncSession, user_id: UUID, day: date, notes: str | None = None
) -> WeeklyUpdate:
    week_start, week_end = week_bounds(day)
    prev_start, prev_end = week_start - timedelta(days=7), week_start - timedelta(days=1)

    body = await crud.get_rows_between(db, BodyTracking, user_id, week_start, week_end)
    prev_body = await crud.get_rows_between(db, BodyTracking, user_id, prev_start, prev_end)
    sessions = await crud.get_rows_between(db, TrainingSession, user_id, week_start, week_end)
    supplements = await crud.get_rows_between(
        db, DailySupplementTracking, user_id, week_start, week_end
    )
    daily_logs = await crud.get_rows_between(db, DailyLog, user_id, week_start, week_end)
    garmin = await crud.get_rows_between(db, GarminDailyStats, user_id, week_start, week_end)

    avg_weight = average(b.weight_kg for b in body)
    prev_avg_weight = average(b.weight_kg for b in prev_body)
    sleep_minutes = average(g.sleep_duration_minutes for g in garmin)

    iso = week_start.isocalendar()
    update = WeeklyUpdate(
        week_start=week_start,
        week_end=week_end,
        week_number=iso.week,
        year=iso.year,
        avg_weight_kg=avg_weight,
        weight_change_kg=avg_weight - prev_avg_weight
        if avg_weight is not None and prev_avg_weight is not None
        else None,
        training_sessions_completed=len(sessions),
        supplement_compliance_percent=supplement_compliance(supplements),
        wellbeing_avg=average(log.mood for log in daily_logs),
        energy_avg=average(log.energy for log in daily_logs),
        sleep_avg_hours=sleep_minutes / 60 if sleep_minutes is not None else None,
    )
    update.text = render_weekly_text(update, notes)
    return update

