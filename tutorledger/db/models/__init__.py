from .student import Student
from .schedule_slot import ScheduleSlot
from .coaching_session import CoachingSession, SessionStatus
