from datetime import date, time
from typing import Literal
from pydantic import BaseModel

from .coaching_session import Session
from .schedule_slot import ScheduleSlot


class DueItem(BaseModel):
    kind: Literal["slot", "session"]
    id: int
    student_name: str | None = None
    start_time: time | None = None
    slot: ScheduleSlot | None = None
    session: Session | None = None


class DueItemRef(BaseModel):
    kind: Literal["slot", "session"]
    id: int
    # Defaults to today; lets a tutor back-fill an earlier day
    on: date | None = None


class RescheduleRequest(DueItemRef):
    new_date: date
    new_time: time


class LifecycleResult(BaseModel):
    sessions: list[Session]


class MonthlyEarnings(BaseModel):
    month: str
    label: str
    earnings: float
    sessions: int

    class Config:
        from_attributes = True


class DashboardSummary(BaseModel):
    total_earnings: float
    growth: float
    monthly: list[MonthlyEarnings]
    due_count: int
