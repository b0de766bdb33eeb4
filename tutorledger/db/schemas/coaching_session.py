from datetime import date, datetime, time
from pydantic import BaseModel, Field

from ...core.constants import Category
from ..models.coaching_session import SessionStatus


class SessionBase(BaseModel):
    student_id: int
    category: Category
    session_date: date
    duration_minutes: int = Field(gt=0)
    notes: str | None = None
    status: SessionStatus = SessionStatus.completed


class SessionCreate(SessionBase):
    # Derived from the student's hourly rate when omitted
    price: float | None = Field(default=None, ge=0)


class SessionUpdate(BaseModel):
    student_id: int | None = None
    category: Category | None = None
    session_date: date | None = None
    duration_minutes: int | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, ge=0)
    notes: str | None = None
    status: SessionStatus | None = None
    rescheduled_to_date: date | None = None
    rescheduled_to_time: time | None = None


class Session(SessionBase):
    id: int
    price: float
    schedule_slot_id: int | None = None
    rescheduled_to_date: date | None = None
    rescheduled_to_time: time | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
