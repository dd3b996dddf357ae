"""Fitness API routes."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import local_today
from ...database import get_db
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from . import crud, services
from .protocol import SUPPLEMENT_PROTOCOL
from .schemas import (
    BodyTrackingResponse,
    BodyTrackingUpsert,
    FitnessHabitCreate,
    FitnessHabitDay,
    FitnessHabitLogResponse,
    FitnessHabitResponse,
    FitnessHabitToggle,
    PersonalRecord,
    SlotNotes,
    SubstanceLogCreate,
    SubstanceLogResponse,
    SupplementChecklist,
    SupplementIntake,
    SupplementSlot,
    TrainingDay,
    TrainingSessionResponse,
    TrainingSessionUpsert,
    TrainingSetCreate,
    TrainingSetResponse,
    WeeklyUpdate,
)

router = APIRouter(prefix="/fitness", tags=["Fitness"])


# ----- Supplements -----


@router.get("/supplements/protocol", response_model=BaseResponse[list[SupplementSlot]])
async def get_supplement_protocol(current_user: CurrentUser):
    return BaseResponse(success=True, data=SUPPLEMENT_PROTOCOL)


@router.get("/supplements/checklist", response_model=BaseResponse[SupplementChecklist])
async def get_supplement_checklist(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    """Get the protocol with what was taken on a day, today by default."""
    checklist = await services.get_supplement_checklist(
        db, current_user.id, day or local_today()
    )
    return BaseResponse(success=True, data=checklist)


@router.put("/supplements/checklist", response_model=BaseResponse[SupplementChecklist])
async def set_supplement_taken(
    data: SupplementIntake,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    checklist = await services.set_supplement_taken(
        db,
        current_user.id,
        data.date or local_today(),
        data.slot_name,
        data.supplement_name,
        data.taken,
    )
    return BaseResponse(success=True, data=checklist)


@router.post(
    "/supplements/checklist/{slot_name}/complete",
    response_model=BaseResponse[SupplementChecklist],
)
async def complete_supplement_slot(
    slot_name: str,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    checklist = await services.complete_slot(
        db, current_user.id, day or local_today(), slot_name
    )
    return BaseResponse(success=True, data=checklist)


@router.put(
    "/supplements/checklist/{slot_name}/notes",
    response_model=BaseResponse[SupplementChecklist],
)
async def save_supplement_slot_notes(
    slot_name: str,
    data: SlotNotes,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    checklist = await services.save_slot_notes(
        db, current_user.id, data.date or local_today(), slot_name, data.notes
    )
    return BaseResponse(success=True, data=checklist)


@router.get("/substances", response_model=BaseResponse[list[SubstanceLogResponse]])
async def list_substance_log(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    """Get supplements, peptides and medication taken on a day, by time."""
    entries = await services.list_substance_log(db, current_user.id, day or local_today())
    return BaseResponse(
        success=True, data=[SubstanceLogResponse.model_validate(e) for e in entries]
    )


@router.post("/substances", response_model=BaseResponse[SubstanceLogResponse])
async def add_substance_entry(
    data: SubstanceLogCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    entry = await services.add_substance_entry(db, current_user.id, data, local_today())
    return BaseResponse(
        success=True,
        message="Entry created successfully",
        data=SubstanceLogResponse.model_validate(entry),
    )


@router.delete("/substances/{entry_id}", response_model=BaseResponse[None])
async def delete_substance_entry(
    entry_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_substance_entry(db, current_user.id, entry_id)
    return BaseResponse(success=True, message="Entry deleted successfully")


# ----- Training -----


@router.get("/training", response_model=BaseResponse[TrainingDay | None])
async def get_training_day(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    """Get the session of a day with its sets grouped by exercise."""
    training = await services.get_training_day(db, current_user.id, day or local_today())
    return BaseResponse(success=True, data=training)


@router.put("/training", response_model=BaseResponse[TrainingSessionResponse])
async def save_training_session(
    data: TrainingSessionUpsert,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    session = await services.save_training_session(
        db, current_user.id, day or local_today(), data
    )
    return BaseResponse(
        success=True,
        message="Session saved successfully",
        data=TrainingSessionResponse.model_validate(session),
    )


@router.get("/training/records", response_model=BaseResponse[list[PersonalRecord]])
async def get_personal_records(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    records = await services.get_personal_records(db, current_user.id)
    return BaseResponse(success=True, data=records)


@router.post(
    "/training/{session_id}/sets", response_model=BaseResponse[TrainingSetResponse]
)
async def add_training_set(
    session_id: UUID,
    data: TrainingSetCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    training_set = await services.add_training_set(db, current_user.id, session_id, data)
    return BaseResponse(
        success=True,
        message="New personal record" if training_set.is_pr else "Set added successfully",
        data=TrainingSetResponse.model_validate(training_set),
    )


@router.delete("/training/sets/{set_id}", response_model=BaseResponse[None])
async def delete_training_set(
    set_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_training_set(db, current_user.id, set_id)
    return BaseResponse(success=True, message="Set deleted successfully")


# ----- Fitness habits -----


@router.get("/habits", response_model=BaseResponse[FitnessHabitDay])
async def get_fitness_habits(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    """Get good and bad habits with what happened on a day."""
    habits = await services.get_fitness_habit_day(db, current_user.id, day or local_today())
    return BaseResponse(success=True, data=habits)


@router.post("/habits", response_model=BaseResponse[FitnessHabitResponse])
async def create_fitness_habit(
    data: FitnessHabitCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    habit = await services.create_fitness_habit(
        db, current_user.id, data, day or local_today()
    )
    return BaseResponse(
        success=True,
        message="Habit created successfully",
        data=FitnessHabitResponse.model_validate(habit),
    )


@router.delete("/habits/{habit_id}", response_model=BaseResponse[None])
async def delete_fitness_habit(
    habit_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_fitness_habit(db, current_user.id, habit_id)
    return BaseResponse(success=True, message="Habit deleted successfully")


@router.put("/habits/{habit_id}/log", response_model=BaseResponse[FitnessHabitLogResponse])
async def toggle_fitness_habit(
    habit_id: UUID,
    data: FitnessHabitToggle,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    log = await services.toggle_fitness_habit(
        db, current_user.id, habit_id, data.date or local_today(), data.completed
    )
    return BaseResponse(success=True, data=FitnessHabitLogResponse.model_validate(log))


# ----- Body tracking -----


@router.get("/body", response_model=BaseResponse[BodyTrackingResponse | None])
async def get_body_tracking(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    record = await crud.get_body_tracking(db, current_user.id, day or local_today())
    return BaseResponse(
        success=True,
        data=BodyTrackingResponse.model_validate(record) if record else None,
    )


@router.put("/body", response_model=BaseResponse[BodyTrackingResponse])
async def upsert_body_tracking(
    data: BodyTrackingUpsert,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
):
    record = await services.upsert_body_tracking(
        db, current_user.id, day or local_today(), data
    )
    return BaseResponse(success=True, data=BodyTrackingResponse.model_validate(record))


@router.get("/weekly-update", response_model=BaseResponse[WeeklyUpdate])
async def get_weekly_update(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    day: date | None = Query(None),
    notes: str | None = Query(None, max_length=2000),
):
    """Summarize the Monday to Sunday week containing ``day`` for the coach."""
    update = await services.get_weekly_update(
        db, current_user.id, day or local_today(), notes
    )
    return BaseResponse(success=True, data=update)
