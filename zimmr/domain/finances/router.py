"""Finance router - yearly overview and revenue goal"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_craftsman_id
from ...database import get_db
from .schemas import FinanceGoalRequest, FinanceStatsResponse
from .service import FinanceService

router = APIRouter(prefix="/finances", tags=["Finances"])


def get_finance_service(db: Session = Depends(get_db)) -> FinanceService:
    return FinanceService(db)


@router.get("", response_model=FinanceStatsResponse)
async def get_finances(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: FinanceService = Depends(get_finance_service),
):
    """Invoice totals of a year (default: the current one) and the revenue goal"""
    return service.get_stats(craftsman_id, year)


@router.post("", response_model=FinanceStatsResponse, status_code=201)
async def set_revenue_goal(
    data: FinanceGoalRequest,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: FinanceService = Depends(get_finance_service),
):
    return service.set_goal(craftsman_id, data.goal_amount)
