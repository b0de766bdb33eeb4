from typing import Annotated
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session
from ..core.errors import (
    ItemNotDue,
    LedgerError,
    OperationInProgress,
    PartialReconciliationError,
    RecordNotFound,
    StoreError,
    ValidationError,
)
from ..db.session import get_db
from ..db.store import EntityStore


ERROR_STATUS: dict[type[LedgerError], int] = {
    ValidationError: 422,
    RecordNotFound: 404,
    ItemNotDue: 409,
    OperationInProgress: 409,
    PartialReconciliationError: 500,
    StoreError: 503,
}


def get_store(db: Annotated[Session, Depends(get_db)]) -> EntityStore:
    return EntityStore(db)


def http_error(exc: LedgerError) -> HTTPException:
    status_code = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    if isinstance(exc, PartialReconciliationError):
        detail = {
            "message": str(exc),
            "rescheduled_session_id": exc.rescheduled_session_id,
        }
    else:
        detail = str(exc)
    return HTTPException(status_code=status_code, detail=detail)
