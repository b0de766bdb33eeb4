from datetime import datetime, time
from pydantic import BaseModel, Field

from ...core.constants import Category


class ScheduleSlotBase(BaseModel):
    student_id: int
    day_of_week: int = Field(ge=0, le=6)
    start_time: time
    duration_minutes: int = Field(gt=0)
    category: Category
    price: float = Field(ge=0)


class ScheduleSlotCreate(ScheduleSlotBase):
    pass


class ScheduleSlotUpdate(BaseModel):
    student_id: int | None = None
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    start_time: time | None = None
    duration_minutes: int | None = Field(default=None, gt=0)
    category: Category | None = None
    price: float | None = Field(default=None, ge=0)
    is_active: bool | None = None


class ScheduleSlot(ScheduleSlotBase):
    id: int
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class WeekdaySchedule(BaseModel):
    day_of_week: int
    day_name: str
    slots: list[ScheduleSlot]
