from .student import Student, StudentCreate, StudentUpdate, StudentStats, StudentScheduleEntry
from .schedule_slot import ScheduleSlot, ScheduleSlotCreate, ScheduleSlotUpdate, WeekdaySchedule
from .coaching_session import Session, SessionCreate, SessionUpdate
from .dashboard import (
    DueItem,
    DueItemRef,
    RescheduleRequest,
    LifecycleResult,
    MonthlyEarnings,
    DashboardSummary,
)
from .insights import CategoryStats, CategoryDescription, EarningsTotal, Insights, Period
from .invoice import Invoice
