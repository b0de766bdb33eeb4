from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum as PyEnum
from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    Time,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ...core.constants import Category
from ..session import Base


class SessionStatus(str, PyEnum):
    pending = "pending"
    completed = "completed"
    missed = "missed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


class CoachingSession(Base):
    __tablename__ = "sessions"
    __table_args__ = (
        UniqueConstraint("schedule_slot_id", "session_date", name="uq_session_slot_date"),
        CheckConstraint("duration_minutes > 0", name="ck_session_duration_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("students.id"), index=True)
    category: Mapped[Category] = mapped_column(Enum(Category, name="category"))
    session_date: Mapped[date] = mapped_column(Date, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=60)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, name="sessionstatus"), default=SessionStatus.completed
    )
    # Slot ids are not foreign keys: hard-deleting a slot keeps its history
    schedule_slot_id: Mapped[int | None] = mapped_column(Integer, index=True)
    rescheduled_to_date: Mapped[date | None] = mapped_column(Date)
    rescheduled_to_time: Mapped[time | None] = mapped_column(Time)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    student = relationship("Student", back_populates="sessions")
