from typing import Literal
from pydantic import BaseModel

from ...core.constants import Category
from .dashboard import MonthlyEarnings


Period = Literal["week", "month", "year"]


class CategoryStats(BaseModel):
    category: Category
    total_earnings: float
    total_sessions: int
    missed_sessions: int
    percentage: float

    class Config:
        from_attributes = True


class EarningsTotal(BaseModel):
    period: Period
    total_earnings: float


class Insights(BaseModel):
    period: Period
    total_earnings: float
    total_sessions: int
    total_missed: int
    categories: list[CategoryStats]
    trend: list[MonthlyEarnings]


class CategoryDescription(BaseModel):
    id: Category
    name: str
    color: str
    bg_color: str
    icon: str

    class Config:
        from_attributes = True
