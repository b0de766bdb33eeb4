from datetime import date
from fastapi import APIRouter, Depends
from ...api import deps
from ...config import get_settings
from ...core.errors import LedgerError
from ...db import models, schemas
from ...db.store import EntityStore
from ...services import invoice_service

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/{student_id}", response_model=schemas.Invoice)
def invoice_for(
    student_id: int,
    start: date | None = None,
    end: date | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    try:
        student = store.require(models.Student, student_id)
        sessions = store.query(
            models.CoachingSession,
            filters={"student_id": student_id},
            ranges={"session_date": (start, end)},
        )
        invoice = invoice_service.invoice_for(sessions, student_id, start, end)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return schemas.Invoice(
        student=schemas.Student.model_validate(student),
        start=invoice.start,
        end=invoice.end,
        sessions=[schemas.Session.model_validate(session) for session in invoice.sessions],
        session_count=invoice.session_count,
        total_minutes=invoice.total_minutes,
        total_hours=invoice.total_hours,
        total_price=invoice.total_price,
        currency=get_settings().currency,
    )
