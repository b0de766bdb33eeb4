from datetime import date
from decimal import Decimal

import pytest

from tutorledger.core.constants import Category
from tutorledger.core.errors import ValidationError
from tutorledger.db import models
from tutorledger.db.models.coaching_session import SessionStatus
from tutorledger.services import invoice_service


def _session(on, price, minutes=60, status=SessionStatus.completed, student_id=1):
    return models.CoachingSession(
        student_id=student_id,
        category=Category.math,
        session_date=on,
        duration_minutes=minutes,
        price=Decimal(str(price)),
        status=status,
    )


def test_invoice_bills_completed_sessions_in_range_oldest_first():
    late = _session(date(2024, 3, 20), 40, minutes=60)
    early = _session(date(2024, 3, 2), 30, minutes=45)
    missed = _session(date(2024, 3, 10), 40, status=SessionStatus.missed)
    pending = _session(date(2024, 3, 11), 40, status=SessionStatus.pending)
    other_student = _session(date(2024, 3, 12), 40, student_id=2)
    outside = _session(date(2024, 4, 1), 40)

    invoice = invoice_service.invoice_for(
        [late, early, missed, pending, other_student, outside],
        1,
        start=date(2024, 3, 1),
        end=date(2024, 3, 31),
    )

    assert invoice.sessions == [early, late]
    assert invoice.session_count == 2
    assert invoice.total_price == Decimal("70")
    assert invoice.total_minutes == 105
    assert invoice.total_hours == pytest.approx(1.75)


def test_invoice_bounds_are_inclusive_and_optional():
    first = _session(date(2024, 3, 1), 10)
    last = _session(date(2024, 3, 31), 10)

    bounded = invoice_service.invoice_for([first, last], 1, date(2024, 3, 1), date(2024, 3, 31))
    open_start = invoice_service.invoice_for([first, last], 1, end=date(2024, 3, 30))
    unbounded = invoice_service.invoice_for([first, last], 1)

    assert bounded.sessions == [first, last]
    assert open_start.sessions == [first]
    assert unbounded.sessions == [first, last]


def test_empty_invoice_has_zero_totals():
    invoice = invoice_service.invoice_for([], 1, date(2024, 3, 1), date(2024, 3, 31))

    assert invoice.sessions == []
    assert invoice.total_price == Decimal("0")
    assert invoice.total_minutes == 0
    assert invoice.total_hours == 0


def test_invoice_rejects_inverted_range():
    with pytest.raises(ValidationError):
        invoice_service.invoice_for([], 1, date(2024, 3, 31), date(2024, 3, 1))
