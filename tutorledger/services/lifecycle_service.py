import logging
import threading
from contextlib import contextmanager
from datetime import date, time
from decimal import Decimal
from typing import Any, Iterator, Mapping

from ..core.errors import (
    ItemNotDue,
    OperationInProgress,
    PartialReconciliationError,
    StoreError,
    ValidationError,
)
from ..db import models
from ..db.models.coaching_session import SessionStatus
from ..db.store import EntityStore
from .occurrence_service import (
    DueItem,
    PendingSession,
    SlotOccurrence,
    day_of_week,
    due_today,
    find_due_item,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class InFlightGuard:
    """Refuses a second lifecycle operation on a due item that is still being processed."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys: set[tuple[str, int]] = set()

    @contextmanager
    def hold(self, key: tuple[str, int]) -> Iterator[None]:
        with self._lock:
            if key in self._keys:
                raise OperationInProgress(f"{key[0]} {key[1]} is already being processed")
            self._keys.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._keys.discard(key)

    def is_busy(self, key: tuple[str, int]) -> bool:
        with self._lock:
            return key in self._keys


in_flight = InFlightGuard()


def list_due(store: EntityStore, on: date) -> list[DueItem]:
    slots = store.query(
        models.ScheduleSlot,
        filters={"is_active": True, "day_of_week": day_of_week(on)},
    )
    sessions = store.query(models.CoachingSession, filters={"session_date": on})
    return due_today(on, slots, sessions)


def resolve_due_item(store: EntityStore, kind: str, item_id: int, *, on: date) -> DueItem:
    item = find_due_item(list_due(store, on), kind, item_id)
    if item is None:
        raise ItemNotDue(f"{kind} {item_id} is not due on {on.isoformat()}")
    return item


def _copied_fields(slot: models.ScheduleSlot) -> dict[str, Any]:
    return {
        "student_id": slot.student_id,
        "category": slot.category,
        "duration_minutes": slot.duration_minutes,
        "price": slot.price,
    }


def _ensure_still_due(store: EntityStore, item: DueItem) -> None:
    if isinstance(item, SlotOccurrence):
        reconciled = store.query(
            models.CoachingSession,
            filters={"schedule_slot_id": item.slot.id, "session_date": item.on},
        )
        if reconciled:
            raise ItemNotDue(f"slot {item.slot.id} is already reconciled for {item.on.isoformat()}")
    elif isinstance(item, PendingSession):
        current = store.get(models.CoachingSession, item.session.id)
        if (
            current is None
            or current.status != SessionStatus.pending
            or current.schedule_slot_id is not None
        ):
            raise ItemNotDue(f"session {item.session.id} is no longer pending")
    else:
        raise TypeError(f"Unsupported due item {item!r}")


def _settle(
    store: EntityStore,
    item: DueItem,
    status: SessionStatus,
    guard: InFlightGuard,
) -> models.CoachingSession:
    with guard.hold(item.key):
        _ensure_still_due(store, item)
        if isinstance(item, SlotOccurrence):
            session = store.insert(
                models.CoachingSession,
                session_date=item.on,
                status=status,
                schedule_slot_id=item.slot.id,
                **_copied_fields(item.slot),
            )
        elif isinstance(item, PendingSession):
            session = store.update(models.CoachingSession, item.session.id, {"status": status})
        else:
            raise TypeError(f"Unsupported due item {item!r}")
    logger.info(
        "Due item settled",
        extra={"item": item.kind, "session_id": session.id, "status": status.value},
    )
    return session


def mark_completed(
    store: EntityStore, item: DueItem, *, guard: InFlightGuard = in_flight
) -> models.CoachingSession:
    return _settle(store, item, SessionStatus.completed, guard)


def mark_missed(
    store: EntityStore, item: DueItem, *, guard: InFlightGuard = in_flight
) -> models.CoachingSession:
    return _settle(store, item, SessionStatus.missed, guard)


def validate_reschedule_target(
    new_date: date | str | None, new_time: time | str | None, *, today: date
) -> tuple[date, time]:
    if not new_date or not new_time:
        raise ValidationError("Both a new date and a new time are required to reschedule")
    try:
        if isinstance(new_date, str):
            new_date = date.fromisoformat(new_date)
        if isinstance(new_time, str):
            new_time = time.fromisoformat(new_time)
    except ValueError as exc:
        raise ValidationError(f"Invalid reschedule target: {exc}") from exc
    if new_date < today:
        raise ValidationError("Sessions cannot be rescheduled into the past")
    return new_date, new_time


def reschedule(
    store: EntityStore,
    item: DueItem,
    new_date: date | str | None,
    new_time: time | str | None,
    *,
    today: date | None = None,
    guard: InFlightGuard = in_flight,
) -> list[models.CoachingSession]:
    """Move a due item to another day.

    A slot occurrence produces two rows: the original marked ``rescheduled``
    and a ``pending`` follow-up on the new date. The two inserts are separate
    commits; if the second one fails the first is left in place and
    ``PartialReconciliationError`` names it so it can be fixed by hand.
    A pending session that is rescheduled again is simply moved.
    """
    new_date, new_time = validate_reschedule_target(
        new_date, new_time, today=today or date.today()
    )
    with guard.hold(item.key):
        _ensure_still_due(store, item)
        if isinstance(item, SlotOccurrence):
            return _reschedule_occurrence(store, item, new_date, new_time)
        if isinstance(item, PendingSession):
            moved = store.update(
                models.CoachingSession,
                item.session.id,
                {"session_date": new_date, "rescheduled_to_time": new_time},
            )
            logger.info(
                "Pending session moved",
                extra={"session_id": moved.id, "session_date": new_date.isoformat()},
            )
            return [moved]
        raise TypeError(f"Unsupported due item {item!r}")


def _reschedule_occurrence(
    store: EntityStore, item: SlotOccurrence, new_date: date, new_time: time
) -> list[models.CoachingSession]:
    copied = _copied_fields(item.slot)
    original = store.insert(
        models.CoachingSession,
        session_date=item.on,
        status=SessionStatus.rescheduled,
        schedule_slot_id=item.slot.id,
        rescheduled_to_date=new_date,
        rescheduled_to_time=new_time,
        **copied,
    )
    original_id = original.id
    try:
        follow_up = store.insert(
            models.CoachingSession,
            session_date=new_date,
            status=SessionStatus.pending,
            schedule_slot_id=None,
            rescheduled_to_time=new_time,
            **copied,
        )
    except StoreError as exc:
        logger.error(
            "Rescheduled occurrence has no pending follow-up",
            extra={
                "session_id": original_id,
                "slot_id": item.slot.id,
                "rescheduled_to_date": new_date.isoformat(),
            },
        )
        raise PartialReconciliationError(original_id) from exc
    logger.info(
        "Slot occurrence rescheduled",
        extra={"session_id": original_id, "follow_up_id": follow_up.id},
    )
    return [original, follow_up]


def price_for_duration(hourly_rate: Decimal | float, duration_minutes: int) -> Decimal:
    rate = Decimal(str(hourly_rate))
    return (rate * duration_minutes / 60).quantize(CENTS)


def _check_session_fields(store: EntityStore, fields: Mapping[str, Any]) -> None:
    if "duration_minutes" in fields and (
        fields["duration_minutes"] is None or fields["duration_minutes"] <= 0
    ):
        raise ValidationError("Duration must be a positive number of minutes")
    if "student_id" in fields and (
        fields["student_id"] is None or store.get(models.Student, fields["student_id"]) is None
    ):
        raise ValidationError(f"Unknown student {fields['student_id']}")


def create_session(store: EntityStore, fields: Mapping[str, Any]) -> models.CoachingSession:
    fields = dict(fields)
    if "student_id" not in fields or "duration_minutes" not in fields:
        raise ValidationError("A session needs a student and a duration")
    _check_session_fields(store, fields)
    if fields.get("price") is None:
        student = store.require(models.Student, fields["student_id"])
        status = fields.get("status", SessionStatus.completed)
        fields["price"] = (
            price_for_duration(student.hourly_rate, fields["duration_minutes"])
            if status == SessionStatus.completed
            else Decimal("0")
        )
    return store.insert(models.CoachingSession, **fields)


def update_session(
    store: EntityStore, session_id: int, fields: Mapping[str, Any]
) -> models.CoachingSession:
    _check_session_fields(store, fields)
    session = store.update(models.CoachingSession, session_id, fields)
    logger.info("Session edited", extra={"session_id": session_id, "fields": sorted(fields)})
    return session


def delete_session(store: EntityStore, session_id: int) -> None:
    # Sibling rows that point at this one through rescheduled_to_date are left alone
    store.delete(models.CoachingSession, session_id)
    logger.info("Session deleted", extra={"session_id": session_id})
