import logging
from typing import Any, Iterable, Mapping

from ..core.errors import ValidationError
from ..db import models
from ..db.store import EntityStore

logger = logging.getLogger(__name__)


def list_slots(store: EntityStore, *, include_inactive: bool = False) -> list[models.ScheduleSlot]:
    filters = {} if include_inactive else {"is_active": True}
    return store.query(
        models.ScheduleSlot,
        filters=filters,
        order_by=("day_of_week", "start_time"),
    )


def _check_slot_fields(store: EntityStore, fields: Mapping[str, Any]) -> None:
    if "duration_minutes" in fields and (
        fields["duration_minutes"] is None or fields["duration_minutes"] <= 0
    ):
        raise ValidationError("Duration must be a positive number of minutes")
    if "day_of_week" in fields and (
        fields["day_of_week"] is None or not 0 <= fields["day_of_week"] <= 6
    ):
        raise ValidationError("Day of week must be between 0 (Sunday) and 6 (Saturday)")
    if "student_id" in fields and (
        fields["student_id"] is None or store.get(models.Student, fields["student_id"]) is None
    ):
        raise ValidationError(f"Unknown student {fields['student_id']}")


def create_slot(store: EntityStore, fields: Mapping[str, Any]) -> models.ScheduleSlot:
    _check_slot_fields(store, fields)
    slot = store.insert(models.ScheduleSlot, **fields)
    logger.info(
        "Schedule slot created",
        extra={"slot_id": slot.id, "student_id": slot.student_id, "day_of_week": slot.day_of_week},
    )
    return slot


def update_slot(
    store: EntityStore, slot_id: int, fields: Mapping[str, Any]
) -> models.ScheduleSlot:
    _check_slot_fields(store, fields)
    return store.update(models.ScheduleSlot, slot_id, fields)


def delete_slot(store: EntityStore, slot_id: int) -> None:
    # Sessions keep their schedule_slot_id; the slot row itself is gone
    store.delete(models.ScheduleSlot, slot_id)
    logger.info("Schedule slot deleted", extra={"slot_id": slot_id})


def _entry_slots(entry: Mapping[str, Any]) -> list[dict[str, Any]]:
    return [
        {
            "day_of_week": day,
            "start_time": entry["start_time"],
            "duration_minutes": entry["duration_minutes"],
            "category": entry["category"],
            "price": entry["price"],
        }
        for day in entry["days_of_week"]
    ]


def check_schedule(store: EntityStore, entries: Iterable[Mapping[str, Any]]) -> None:
    for entry in entries:
        if not entry.get("days_of_week"):
            raise ValidationError("A schedule entry needs at least one day of the week")
        if entry.get("category") is None:
            raise ValidationError("A schedule entry needs a category")
        for fields in _entry_slots(entry):
            _check_slot_fields(store, fields)


def replace_student_slots(
    store: EntityStore, student_id: int, entries: Iterable[Mapping[str, Any]]
) -> list[models.ScheduleSlot]:
    """Delete the student's active slots and create one per entry and weekday.

    Inactive slots are left alone. Each delete and create is its own write.
    """
    entries = list(entries)
    check_schedule(store, entries)
    current = store.query(
        models.ScheduleSlot, filters={"student_id": student_id, "is_active": True}
    )
    for slot in current:
        delete_slot(store, slot.id)
    created = [
        create_slot(store, {**fields, "student_id": student_id})
        for entry in entries
        for fields in _entry_slots(entry)
    ]
    logger.info(
        "Student schedule replaced",
        extra={
            "student_id": student_id,
            "slots_removed": len(current),
            "slots_added": len(created),
        },
    )
    return created
