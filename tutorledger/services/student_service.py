import logging
from typing import Any, Iterable, Mapping, Sequence

from ..core.constants import Category
from ..db import models
from ..db.store import EntityStore
from . import schedule_service

logger = logging.getLogger(__name__)


def list_students(store: EntityStore, *, include_inactive: bool = False) -> list[models.Student]:
    filters = {} if include_inactive else {"is_active": True}
    return store.query(models.Student, filters=filters, order_by=("-created_at", "-id"))


def _schedule_category(schedule: Sequence[Mapping[str, Any]]) -> Category | None:
    # The first entry decides the student's own category
    return schedule[0]["category"] if schedule else None


def create_student(
    store: EntityStore,
    fields: Mapping[str, Any],
    schedule: Iterable[Mapping[str, Any]] = (),
) -> models.Student:
    """Create a student and, optionally, their weekly slots.

    Every schedule entry becomes one slot per listed weekday, each with the
    entry's own category. Entries are checked before anything is written.
    """
    schedule = list(schedule)
    schedule_service.check_schedule(store, schedule)
    fields = dict(fields)
    fields["category"] = _schedule_category(schedule) or fields.get("category") or Category.gym
    student = store.insert(models.Student, **fields)
    if schedule:
        schedule_service.replace_student_slots(store, student.id, schedule)
    logger.info("Student created", extra={"student_id": student.id})
    return student


def update_student(
    store: EntityStore,
    student_id: int,
    fields: Mapping[str, Any],
    schedule: Iterable[Mapping[str, Any]] | None = None,
) -> models.Student:
    """Edit a student; a given ``schedule`` replaces their active slots."""
    fields = dict(fields)
    if schedule is not None:
        schedule = list(schedule)
        schedule_service.check_schedule(store, schedule)
        if schedule:
            fields["category"] = _schedule_category(schedule)
    student = store.update(models.Student, student_id, fields)
    if schedule is not None:
        schedule_service.replace_student_slots(store, student_id, schedule)
    return student


def deactivate_student(store: EntityStore, student_id: int) -> models.Student:
    student = store.delete(models.Student, student_id)
    logger.info("Student deactivated", extra={"student_id": student_id})
    return student
