from datetime import date
from fastapi import APIRouter, Depends
from ...api import deps
from ...core.constants import Category
from ...core.errors import LedgerError
from ...db import models, schemas
from ...db.models.coaching_session import SessionStatus
from ...db.store import EntityStore
from ...services import lifecycle_service

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=list[schemas.Session])
def list_sessions(
    student_id: int | None = None,
    category: Category | None = None,
    status: SessionStatus | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    filters = {}
    if student_id is not None:
        filters["student_id"] = student_id
    if category:
        filters["category"] = category
    if status:
        filters["status"] = status
    return store.query(
        models.CoachingSession,
        filters=filters,
        ranges={"session_date": (from_date, to_date)},
        order_by=("-session_date", "-id"),
    )


@router.post("", response_model=schemas.Session)
def create_session(
    payload: schemas.SessionCreate,
    store: EntityStore = Depends(deps.get_store),
):
    try:
        return lifecycle_service.create_session(store, payload.model_dump())
    except LedgerError as exc:
        raise deps.http_error(exc) from exc


@router.patch("/{session_id}", response_model=schemas.Session)
def update_session(
    session_id: int,
    payload: schemas.SessionUpdate,
    store: EntityStore = Depends(deps.get_store),
):
    try:
        return lifecycle_service.update_session(
            store, session_id, payload.model_dump(exclude_unset=True)
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc


@router.delete("/{session_id}")
def delete_session(session_id: int, store: EntityStore = Depends(deps.get_store)):
    try:
        lifecycle_service.delete_session(store, session_id)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return {"status": "deleted"}
