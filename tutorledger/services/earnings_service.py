"""Earnings and attendance figures computed from the session history.

Only ``completed`` sessions earn money. Missed and cancelled sessions count
as missed attendance; rescheduled ones are in transit and count as neither.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from ..core.constants import CATEGORIES, Category, TIME_PERIODS
from ..core.errors import ValidationError
from ..db import models
from ..db.models.coaching_session import SessionStatus

ZERO = Decimal("0")
MISSED_STATUSES = (SessionStatus.missed, SessionStatus.cancelled)


@dataclass(slots=True)
class MonthlyEarnings:
    month: str
    label: str
    earnings: Decimal
    sessions: int


@dataclass(slots=True)
class CategoryStats:
    category: Category
    total_earnings: Decimal
    total_sessions: int
    missed_sessions: int
    percentage: float


@dataclass(slots=True)
class PeriodInsights:
    period: str
    total_earnings: Decimal
    total_sessions: int
    total_missed: int
    categories: list[CategoryStats]
    trend: list[MonthlyEarnings]


@dataclass(slots=True)
class StudentTotals:
    student_id: int
    total_sessions: int
    total_earnings: Decimal


@dataclass(slots=True)
class DashboardFigures:
    total_earnings: Decimal
    growth: float
    monthly: list[MonthlyEarnings]


def _amount(value) -> Decimal:
    return Decimal(str(value)) if value is not None else ZERO


def completed(sessions: Iterable[models.CoachingSession]) -> list[models.CoachingSession]:
    return [s for s in sessions if s.status == SessionStatus.completed]


def total_earnings(sessions: Iterable[models.CoachingSession]) -> Decimal:
    return sum((_amount(s.price) for s in completed(sessions)), ZERO)


def _month_start(today: date, months_back: int) -> date:
    index = today.year * 12 + (today.month - 1) - months_back
    year, month = divmod(index, 12)
    return date(year, month + 1, 1)


def _month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def monthly_series(
    sessions: Iterable[models.CoachingSession], months: int, *, today: date
) -> list[MonthlyEarnings]:
    """Completed earnings for the ``months`` calendar months ending with today's month.

    Oldest month first; months without completed sessions are reported as zero.
    """
    if months < 1:
        raise ValidationError("At least one month is required for a trend")
    by_month: dict[str, list[models.CoachingSession]] = {}
    for session in completed(sessions):
        by_month.setdefault(_month_key(session.session_date), []).append(session)

    series = []
    for back in range(months - 1, -1, -1):
        start = _month_start(today, back)
        key = _month_key(start)
        bucket = by_month.get(key, [])
        series.append(
            MonthlyEarnings(
                month=key,
                label=start.strftime("%b"),
                earnings=sum((_amount(s.price) for s in bucket), ZERO),
                sessions=len(bucket),
            )
        )
    return series


def growth(sessions: Sequence[models.CoachingSession], *, today: date) -> float:
    """Percent change of this month's earnings over last month's, 0 if last month earned nothing."""
    previous, current = monthly_series(sessions, 2, today=today)
    if previous.earnings <= 0:
        return 0.0
    return float((current.earnings - previous.earnings) / previous.earnings * 100)


def period_bounds(period: str, *, today: date) -> tuple[date, date]:
    if period == "week":
        start = today - timedelta(days=6)
    elif period == "month":
        start = today.replace(day=1)
    elif period == "year":
        start = date(today.year, 1, 1)
    else:
        raise ValidationError(f"Unknown period {period!r}, expected one of {', '.join(TIME_PERIODS)}")
    return start, today


def filter_period(
    sessions: Iterable[models.CoachingSession], period: str, *, today: date
) -> list[models.CoachingSession]:
    start, end = period_bounds(period, today=today)
    return [s for s in sessions if start <= s.session_date <= end]


def category_breakdown(sessions: Iterable[models.CoachingSession]) -> list[CategoryStats]:
    settled = [s for s in sessions if s.status != SessionStatus.rescheduled]
    overall = total_earnings(settled)

    stats = []
    for category in CATEGORIES:
        in_category = [s for s in settled if s.category == category]
        earned = completed(in_category)
        earnings = sum((_amount(s.price) for s in earned), ZERO)
        stats.append(
            CategoryStats(
                category=category,
                total_earnings=earnings,
                total_sessions=len(earned),
                missed_sessions=sum(1 for s in in_category if s.status in MISSED_STATUSES),
                percentage=float(earnings / overall * 100) if overall > 0 else 0.0,
            )
        )
    return sorted(stats, key=lambda item: item.total_earnings, reverse=True)


def insights(
    sessions: Sequence[models.CoachingSession],
    period: str,
    *,
    today: date,
    trend_months: int = 12,
) -> PeriodInsights:
    categories = category_breakdown(filter_period(sessions, period, today=today))
    return PeriodInsights(
        period=period,
        total_earnings=sum((c.total_earnings for c in categories), ZERO),
        total_sessions=sum(c.total_sessions for c in categories),
        total_missed=sum(c.missed_sessions for c in categories),
        categories=categories,
        trend=monthly_series(sessions, trend_months, today=today),
    )


def student_totals(
    sessions: Iterable[models.CoachingSession], student_id: int
) -> StudentTotals:
    mine = [s for s in sessions if s.student_id == student_id]
    return StudentTotals(
        student_id=student_id,
        total_sessions=len(mine),
        total_earnings=total_earnings(mine),
    )


def dashboard_summary(
    sessions: Sequence[models.CoachingSession], *, today: date, months: int = 6
) -> DashboardFigures:
    return DashboardFigures(
        total_earnings=total_earnings(sessions),
        growth=growth(sessions, today=today),
        monthly=monthly_series(sessions, months, today=today),
    )
