from . import (
    earnings_service,
    invoice_service,
    lifecycle_service,
    occurrence_service,
    schedule_service,
    student_service,
)
__all__ = [
    "earnings_service",
    "invoice_service",
    "lifecycle_service",
    "occurrence_service",
    "schedule_service",
    "student_service",
]
