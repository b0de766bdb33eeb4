from datetime import date
from pydantic import BaseModel

from .coaching_session import Session
from .student import Student


class Invoice(BaseModel):
    student: Student
    start: date | None = None
    end: date | None = None
    sessions: list[Session]
    session_count: int
    total_minutes: int
    total_hours: float
    total_price: float
    currency: str
