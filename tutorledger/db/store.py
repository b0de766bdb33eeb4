"""Entity store adapter over a SQLAlchemy session.

Every write is committed on its own: the store gives single-row consistency
and nothing more, so callers that need several rows written must handle a
failure between them themselves.
"""

import logging
from enum import Enum as PyEnum
from typing import Any, Iterable, Mapping, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import RecordNotFound, StoreError, ValidationError
from . import models

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class DeletePolicy(str, PyEnum):
    soft = "soft"
    hard = "hard"


# Students keep their history; slots and sessions are removed outright
DELETE_POLICIES: dict[type, DeletePolicy] = {
    models.Student: DeletePolicy.soft,
    models.ScheduleSlot: DeletePolicy.hard,
    models.CoachingSession: DeletePolicy.hard,
}


class EntityStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, model: type[ModelT], record_id: int) -> ModelT | None:
        return self.db.get(model, record_id)

    def require(self, model: type[ModelT], record_id: int) -> ModelT:
        record = self.get(model, record_id)
        if record is None:
            raise RecordNotFound(model.__name__, record_id)
        return record

    def query(
        self,
        model: type[ModelT],
        *,
        filters: Mapping[str, Any] | None = None,
        ranges: Mapping[str, tuple[Any, Any]] | None = None,
        order_by: Iterable[str] = (),
    ) -> list[ModelT]:
        """Select rows by equality and inclusive range filters.

        ``order_by`` takes field names; a leading ``-`` sorts that field
        descending.
        """
        stmt = select(model)
        for field, value in (filters or {}).items():
            column = getattr(model, field)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        for field, (low, high) in (ranges or {}).items():
            column = getattr(model, field)
            if low is not None:
                stmt = stmt.where(column >= low)
            if high is not None:
                stmt = stmt.where(column <= high)
        for field in order_by:
            if field.startswith("-"):
                stmt = stmt.order_by(getattr(model, field[1:]).desc())
            else:
                stmt = stmt.order_by(getattr(model, field).asc())
        return list(self.db.execute(stmt).scalars().all())

    def insert(self, model: type[ModelT], **fields: Any) -> ModelT:
        self._check_not_null(model, fields)
        record = model(**fields)
        self.db.add(record)
        self._commit("insert", record)
        self.db.refresh(record)
        return record

    def update(self, model: type[ModelT], record_id: int, fields: Mapping[str, Any]) -> ModelT:
        self._check_not_null(model, fields)
        record = self.require(model, record_id)
        for key, value in fields.items():
            setattr(record, key, value)
        self._commit("update", record)
        self.db.refresh(record)
        return record

    def delete(self, model: type[ModelT], record_id: int) -> ModelT:
        record = self.require(model, record_id)
        policy = DELETE_POLICIES[model]
        if policy is DeletePolicy.soft:
            record.is_active = False
        else:
            self.db.delete(record)
        self._commit("delete", record)
        if policy is DeletePolicy.soft:
            self.db.refresh(record)
        return record

    @staticmethod
    def _check_not_null(model: type, fields: Mapping[str, Any]) -> None:
        columns = model.__table__.columns
        missing = sorted(
            name
            for name, value in fields.items()
            if value is None and name in columns and not columns[name].nullable
        )
        if missing:
            raise ValidationError(
                f"{model.__name__} fields cannot be empty: {', '.join(missing)}"
            )

    def _commit(self, action: str, record: Any) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(
                "Store write failed",
                extra={"action": action, "table": record.__tablename__},
            )
            raise StoreError(f"Could not {action} {type(record).__name__}") from exc
