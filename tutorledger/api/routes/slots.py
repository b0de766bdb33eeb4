from fastapi import APIRouter, Depends
from ...api import deps
from ...core.errors import LedgerError
from ...db import schemas
from ...db.store import EntityStore
from ...services import occurrence_service, schedule_service

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("", response_model=list[schemas.ScheduleSlot])
def list_slots(
    student_id: int | None = None,
    day_of_week: int | None = None,
    include_inactive: bool = False,
    store: EntityStore = Depends(deps.get_store),
):
    slots = schedule_service.list_slots(store, include_inactive=include_inactive)
    if student_id is not None:
        slots = [slot for slot in slots if slot.student_id == student_id]
    if day_of_week is not None:
        slots = [slot for slot in slots if slot.day_of_week == day_of_week]
    return slots


@router.get("/week", response_model=list[schemas.WeekdaySchedule])
def weekly_schedule(store: EntityStore = Depends(deps.get_store)):
    slots = schedule_service.list_slots(store)
    return [
        schemas.WeekdaySchedule(
            day_of_week=index,
            day_name=name,
            slots=[schemas.ScheduleSlot.model_validate(slot) for slot in day_slots],
        )
        for index, name, day_slots in occurrence_service.slots_by_weekday(slots)
    ]


@router.post("", response_model=schemas.ScheduleSlot)
def create_slot(
    payload: schemas.ScheduleSlotCreate,
    store: EntityStore = Depends(deps.get_store),
):
    try:
        return schedule_service.create_slot(store, payload.model_dump())
    except LedgerError as exc:
        raise deps.http_error(exc) from exc


@router.patch("/{slot_id}", response_model=schemas.ScheduleSlot)
def update_slot(
    slot_id: int,
    payload: schemas.ScheduleSlotUpdate,
    store: EntityStore = Depends(deps.get_store),
):
    try:
        return schedule_service.update_slot(store, slot_id, payload.model_dump(exclude_unset=True))
    except LedgerError as exc:
        raise deps.http_error(exc) from exc


@router.delete("/{slot_id}")
def delete_slot(slot_id: int, store: EntityStore = Depends(deps.get_store)):
    try:
        schedule_service.delete_slot(store, slot_id)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return {"status": "deleted"}
