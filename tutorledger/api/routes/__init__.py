from . import (
    students,
    slots,
    sessions,
    dashboard,
    insights,
    invoices,
    misc,
)

__all__ = [
    "students",
    "slots",
    "sessions",
    "dashboard",
    "insights",
    "invoices",
    "misc",
]
