"""Common application-wide constants."""

from dataclasses import dataclass
from enum import Enum as PyEnum


class Category(str, PyEnum):
    gym = "gym"
    swimming = "swimming"
    math = "math"


@dataclass(frozen=True, slots=True)
class CategoryInfo:
    id: Category
    name: str
    color: str
    bg_color: str
    icon: str


# Declaration order is the display order and the tie-break order in reports
CATEGORIES: dict[Category, CategoryInfo] = {
    Category.gym: CategoryInfo(Category.gym, "Gym", "#F59E0B", "#FEF3C7", "dumbbell"),
    Category.swimming: CategoryInfo(
        Category.swimming, "Swimming", "#3B82F6", "#DBEAFE", "waves"
    ),
    Category.math: CategoryInfo(Category.math, "Math", "#10B981", "#D1FAE5", "calculator"),
}

# Sunday first, matching ``ScheduleSlot.day_of_week``
DAYS_OF_WEEK = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

TIME_PERIODS = ("week", "month", "year")


__all__ = [
    "Category",
    "CategoryInfo",
    "CATEGORIES",
    "DAYS_OF_WEEK",
    "TIME_PERIODS",
]
