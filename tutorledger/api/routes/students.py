from fastapi import APIRouter, Depends
from ...api import deps
from ...core.constants import Category
from ...core.errors import LedgerError
from ...db import models, schemas
from ...db.store import EntityStore
from ...services import earnings_service, student_service

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=list[schemas.Student])
def list_students(
    include_inactive: bool = False,
    category: Category | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    students = student_service.list_students(store, include_inactive=include_inactive)
    if category:
        # A student belongs to a category when one of their active slots does
        slot_owners = {
            slot.student_id
            for slot in store.query(
                models.ScheduleSlot, filters={"category": category, "is_active": True}
            )
        }
        students = [student for student in students if student.id in slot_owners]
    return students


@router.post("", response_model=schemas.Student)
def create_student(
    payload: schemas.StudentCreate,
    store: EntityStore = Depends(deps.get_store),
):
    fields = payload.model_dump(exclude={"schedule"})
    schedule = [entry.model_dump() for entry in payload.schedule]
    try:
        return student_service.create_student(store, fields, schedule)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc


@router.get("/{student_id}", response_model=schemas.Student)
def get_student(student_id: int, store: EntityStore = Depends(deps.get_store)):
    try:
        return store.require(models.Student, student_id)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc


@router.get("/{student_id}/stats", response_model=schemas.StudentStats)
def student_stats(student_id: int, store: EntityStore = Depends(deps.get_store)):
    try:
        store.require(models.Student, student_id)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    sessions = store.query(models.CoachingSession, filters={"student_id": student_id})
    return schemas.StudentStats.model_validate(
        earnings_service.student_totals(sessions, student_id)
    )


@router.patch("/{student_id}", response_model=schemas.Student)
def update_student(
    student_id: int,
    payload: schemas.StudentUpdate,
    store: EntityStore = Depends(deps.get_store),
):
    fields = payload.model_dump(exclude_unset=True, exclude={"schedule"})
    schedule = (
        None if payload.schedule is None else [entry.model_dump() for entry in payload.schedule]
    )
    try:
        return student_service.update_student(store, student_id, fields, schedule)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc


@router.delete("/{student_id}")
def deactivate_student(student_id: int, store: EntityStore = Depends(deps.get_store)):
    try:
        student_service.deactivate_student(store, student_id)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return {"status": "deactivated"}
