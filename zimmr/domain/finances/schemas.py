"""Finance overview schemas"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ...shared.schemas import ApiModel


class FinanceGoalRequest(ApiModel):
    goal_amount: float = Field(gt=0)


class FinanceGoalResponse(ApiModel):
    id: int
    craftsman_id: int
    goal_amount: float
    goal_period: str
    updated_at: Optional[datetime] = None


class MonthlyTotals(ApiModel):
    """Cumulative amounts at the end of each month, January first"""

    paid: list[float]
    open: list[float]


class FinanceStatsResponse(ApiModel):
    year: int
    goal: Optional[FinanceGoalResponse] = None
    total_revenue: float
    total_open: float
    monthly: MonthlyTotals
