"""What is due on a given day.

A day's list is the active recurring slots for that weekday which have not
been reconciled yet, followed by the rescheduled occurrences that were moved
onto that day and are still pending. Everything here is pure: the functions
only read the slots and sessions they are given.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Literal, Union

from ..core.constants import DAYS_OF_WEEK
from ..db import models
from ..db.models.coaching_session import SessionStatus


@dataclass(frozen=True, slots=True)
class SlotOccurrence:
    slot: models.ScheduleSlot
    on: date

    kind: Literal["slot"] = "slot"

    @property
    def key(self) -> tuple[str, int]:
        return (self.kind, self.slot.id)

    @property
    def start_time(self) -> time:
        return self.slot.start_time

    @property
    def student_id(self) -> int:
        return self.slot.student_id


@dataclass(frozen=True, slots=True)
class PendingSession:
    session: models.CoachingSession

    kind: Literal["session"] = "session"

    @property
    def key(self) -> tuple[str, int]:
        return (self.kind, self.session.id)

    @property
    def start_time(self) -> time | None:
        return self.session.rescheduled_to_time

    @property
    def student_id(self) -> int:
        return self.session.student_id


DueItem = Union[SlotOccurrence, PendingSession]


def day_of_week(value: date) -> int:
    """Weekday index with Sunday as 0."""
    return value.isoweekday() % 7


def _missing_time_last(session: models.CoachingSession) -> tuple[bool, time]:
    value = session.rescheduled_to_time
    return (value is None, value or time.min)


def due_today(
    target_date: date,
    schedule_slots: Iterable[models.ScheduleSlot],
    sessions: Iterable[models.CoachingSession],
) -> list[DueItem]:
    weekday = day_of_week(target_date)
    todays_slots = [
        slot for slot in schedule_slots if slot.is_active and slot.day_of_week == weekday
    ]
    todays_sessions = [s for s in sessions if s.session_date == target_date]

    reconciled = {
        s.schedule_slot_id for s in todays_sessions if s.schedule_slot_id is not None
    }
    open_slots = sorted(
        (slot for slot in todays_slots if slot.id not in reconciled),
        key=lambda slot: slot.start_time,
    )
    moved_in = sorted(
        (
            s
            for s in todays_sessions
            if s.status == SessionStatus.pending and s.schedule_slot_id is None
        ),
        key=_missing_time_last,
    )

    items: list[DueItem] = [SlotOccurrence(slot=slot, on=target_date) for slot in open_slots]
    items.extend(PendingSession(session=session) for session in moved_in)
    return items


def find_due_item(items: Iterable[DueItem], kind: str, item_id: int) -> DueItem | None:
    for item in items:
        if item.key == (kind, item_id):
            return item
    return None


def slots_by_weekday(
    schedule_slots: Iterable[models.ScheduleSlot],
) -> list[tuple[int, str, list[models.ScheduleSlot]]]:
    """Active slots grouped per weekday, Sunday first, each day sorted by start time."""
    days: list[list[models.ScheduleSlot]] = [[] for _ in DAYS_OF_WEEK]
    for slot in schedule_slots:
        if slot.is_active:
            days[slot.day_of_week].append(slot)
    return [
        (index, DAYS_OF_WEEK[index], sorted(day, key=lambda slot: slot.start_time))
        for index, day in enumerate(days)
    ]
