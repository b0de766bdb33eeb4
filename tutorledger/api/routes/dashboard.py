from datetime import date
from fastapi import APIRouter, Depends
from ...api import deps
from ...config import get_settings
from ...core.errors import LedgerError
from ...db import models, schemas
from ...db.store import EntityStore
from ...services import earnings_service, lifecycle_service
from ...services.occurrence_service import DueItem, SlotOccurrence

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _due_item_out(item: DueItem, names: dict[int, str]) -> schemas.DueItem:
    if isinstance(item, SlotOccurrence):
        return schemas.DueItem(
            kind=item.kind,
            id=item.slot.id,
            student_name=names.get(item.student_id),
            start_time=item.start_time,
            slot=schemas.ScheduleSlot.model_validate(item.slot),
        )
    return schemas.DueItem(
        kind=item.kind,
        id=item.session.id,
        student_name=names.get(item.student_id),
        start_time=item.start_time,
        session=schemas.Session.model_validate(item.session),
    )


def _result(sessions: list[models.CoachingSession]) -> schemas.LifecycleResult:
    return schemas.LifecycleResult(
        sessions=[schemas.Session.model_validate(session) for session in sessions]
    )


@router.get("/due", response_model=list[schemas.DueItem])
def list_due_today(
    on: date | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    items = lifecycle_service.list_due(store, on or date.today())
    # Deactivated students keep their names on outstanding items
    names = {student.id: student.name for student in store.query(models.Student)}
    return [_due_item_out(item, names) for item in items]


@router.post("/complete", response_model=schemas.LifecycleResult)
def mark_completed(
    payload: schemas.DueItemRef,
    store: EntityStore = Depends(deps.get_store),
):
    try:
        item = lifecycle_service.resolve_due_item(
            store, payload.kind, payload.id, on=payload.on or date.today()
        )
        session = lifecycle_service.mark_completed(store, item)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return _result([session])


@router.post("/miss", response_model=schemas.LifecycleResult)
def mark_missed(
    payload: schemas.DueItemRef,
    store: EntityStore = Depends(deps.get_store),
):
    try:
        item = lifecycle_service.resolve_due_item(
            store, payload.kind, payload.id, on=payload.on or date.today()
        )
        session = lifecycle_service.mark_missed(store, item)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return _result([session])


@router.post("/reschedule", response_model=schemas.LifecycleResult)
def reschedule(
    payload: schemas.RescheduleRequest,
    store: EntityStore = Depends(deps.get_store),
):
    today = date.today()
    try:
        item = lifecycle_service.resolve_due_item(
            store, payload.kind, payload.id, on=payload.on or today
        )
        sessions = lifecycle_service.reschedule(
            store, item, payload.new_date, payload.new_time, today=today
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return _result(sessions)


@router.get("/summary", response_model=schemas.DashboardSummary)
def summary(
    on: date | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    today = on or date.today()
    sessions = store.query(models.CoachingSession)
    figures = earnings_service.dashboard_summary(
        sessions, today=today, months=get_settings().dashboard_trend_months
    )
    return schemas.DashboardSummary(
        total_earnings=figures.total_earnings,
        growth=figures.growth,
        monthly=[schemas.MonthlyEarnings.model_validate(month) for month in figures.monthly],
        due_count=len(lifecycle_service.list_due(store, today)),
    )
