from datetime import datetime, time
from typing import Annotated
from pydantic import BaseModel, Field

from ...core.constants import Category


class StudentBase(BaseModel):
    name: str = Field(min_length=1)
    hourly_rate: float = Field(ge=0)
    category: Category


class StudentScheduleEntry(BaseModel):
    """One weekly time expanded into a slot for each listed weekday."""

    days_of_week: list[Annotated[int, Field(ge=0, le=6)]] = Field(min_length=1)
    start_time: time
    duration_minutes: int = Field(gt=0)
    category: Category
    price: float = Field(ge=0)


class StudentCreate(StudentBase):
    # Taken from the first schedule entry when a schedule is given
    category: Category | None = None
    schedule: list[StudentScheduleEntry] = []


class StudentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    hourly_rate: float | None = Field(default=None, ge=0)
    category: Category | None = None
    is_active: bool | None = None
    # Replaces the active weekly slots when present
    schedule: list[StudentScheduleEntry] | None = None


class Student(StudentBase):
    id: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class StudentStats(BaseModel):
    student_id: int
    total_sessions: int
    total_earnings: float

    class Config:
        from_attributes = True
