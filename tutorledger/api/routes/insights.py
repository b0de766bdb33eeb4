from datetime import date
from fastapi import APIRouter, Depends, Query
from ...api import deps
from ...config import get_settings
from ...core.errors import LedgerError
from ...db import models, schemas
from ...db.store import EntityStore
from ...services import earnings_service

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("", response_model=schemas.Insights)
def insights(
    period: schemas.Period = "month",
    on: date | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    sessions = store.query(models.CoachingSession)
    result = earnings_service.insights(
        sessions,
        period,
        today=on or date.today(),
        trend_months=get_settings().insights_trend_months,
    )
    return schemas.Insights(
        period=period,
        total_earnings=result.total_earnings,
        total_sessions=result.total_sessions,
        total_missed=result.total_missed,
        categories=[schemas.CategoryStats.model_validate(c) for c in result.categories],
        trend=[schemas.MonthlyEarnings.model_validate(m) for m in result.trend],
    )


@router.get("/earnings", response_model=schemas.EarningsTotal)
def earnings(
    period: schemas.Period = "month",
    on: date | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    start, end = earnings_service.period_bounds(period, today=on or date.today())
    sessions = store.query(models.CoachingSession, ranges={"session_date": (start, end)})
    return schemas.EarningsTotal(
        period=period, total_earnings=earnings_service.total_earnings(sessions)
    )


@router.get("/categories", response_model=list[schemas.CategoryStats])
def category_breakdown(
    period: schemas.Period = "month",
    on: date | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    sessions = earnings_service.filter_period(
        store.query(models.CoachingSession), period, today=on or date.today()
    )
    return [
        schemas.CategoryStats.model_validate(stats)
        for stats in earnings_service.category_breakdown(sessions)
    ]


@router.get("/trend", response_model=list[schemas.MonthlyEarnings])
def monthly_trend(
    months: int = Query(default=6, ge=1, le=120),
    on: date | None = None,
    store: EntityStore = Depends(deps.get_store),
):
    try:
        series = earnings_service.monthly_series(
            store.query(models.CoachingSession), months, today=on or date.today()
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return [schemas.MonthlyEarnings.model_validate(month) for month in series]
