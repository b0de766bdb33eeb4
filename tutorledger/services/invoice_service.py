from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from ..core.errors import ValidationError
from ..db import models
from ..db.models.coaching_session import SessionStatus


@dataclass(slots=True)
class Invoice:
    student_id: int
    start: date | None
    end: date | None
    sessions: list[models.CoachingSession]
    total_price: Decimal
    total_minutes: int

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def total_hours(self) -> float:
        return self.total_minutes / 60


def invoice_for(
    sessions: Iterable[models.CoachingSession],
    student_id: int,
    start: date | None = None,
    end: date | None = None,
) -> Invoice:
    """Completed sessions of one student within ``[start, end]``, oldest first.

    A missing bound leaves that side open.
    """
    if start and end and start > end:
        raise ValidationError("Invoice start date is after its end date")
    billable = sorted(
        (
            s
            for s in sessions
            if s.status == SessionStatus.completed
            and s.student_id == student_id
            and (start is None or s.session_date >= start)
            and (end is None or s.session_date <= end)
        ),
        key=lambda s: s.session_date,
    )
    return Invoice(
        student_id=student_id,
        start=start,
        end=end,
        sessions=billable,
        total_price=sum((Decimal(str(s.price)) for s in billable), Decimal("0")),
        total_minutes=sum(s.duration_minutes for s in billable),
    )
