"""
Finance overview: paid and open invoice totals per month of a year, plus the
craftsman's yearly revenue goal.
"""

import logging
from datetime import datetime, timezone
from itertools import accumulate
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import UpstreamError
from ...utils.timeutils import local_tz, stored_utc
from .repository import FinanceRepository

logger = logging.getLogger(__name__)

GOAL_PERIOD = "year"


def year_bounds(year: int, tz_name: Optional[str] = None) -> tuple[datetime, datetime]:
    """Half-open [local Jan 1, next local Jan 1) of a year, in UTC"""
    tz = local_tz(tz_name)
    start = datetime(year, 1, 1, tzinfo=tz)
    end = datetime(year + 1, 1, 1, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def monthly_totals(invoices, tz_name: Optional[str] = None) -> dict:
    """
    Cumulative paid and open amounts per local month. Paid invoices count as
    revenue, cancelled ones are ignored and everything else is open.
    """
    tz = local_tz(tz_name)
    paid = [0.0] * 12
    open_ = [0.0] * 12
    for created_at, status, total_amount in invoices:
        if status == "cancelled" or created_at is None:
            continue
        month = stored_utc(created_at).astimezone(tz).month - 1
        if status == "paid":
            paid[month] += total_amount or 0.0
        else:
            open_[month] += total_amount or 0.0
    return {
        "paid": [round(v, 2) for v in accumulate(paid)],
        "open": [round(v, 2) for v in accumulate(open_)],
    }


class FinanceService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = FinanceRepository(db)

    def get_stats(self, craftsman_id: int, year: Optional[int] = None) -> dict:
        year = year or datetime.now(local_tz()).year
        start, end = year_bounds(year)
        try:
            goal = self.repo.get_goal(craftsman_id, GOAL_PERIOD)
            invoices = self.repo.invoices_created_between(craftsman_id, start, end)
        except SQLAlchemyError as e:
            raise UpstreamError("Failed to fetch finance data", cause=e) from e

        monthly = monthly_totals(invoices)
        return {
            "year": year,
            "goal": goal,
            "total_revenue": monthly["paid"][-1],
            "total_open": monthly["open"][-1],
            "monthly": monthly,
        }

    def set_goal(self, craftsman_id: int, amount: float) -> dict:
        """Create or replace the yearly revenue goal and return the fresh overview"""
        amount = round(amount, 2)
        try:
            goal = self.repo.get_goal(craftsman_id, GOAL_PERIOD)
            if goal:
                self.repo.update_goal(goal, amount)
            else:
                try:
                    self.repo.create_goal(craftsman_id, GOAL_PERIOD, amount)
                except IntegrityError as conflict:
                    # A concurrent request created the goal first
                    winner = self.repo.get_goal(craftsman_id, GOAL_PERIOD)
                    if not winner:
                        raise UpstreamError("Failed to save goal", cause=conflict) from conflict
                    self.repo.update_goal(winner, amount)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to save goal", cause=e) from e
        logger.info(f"Yearly revenue goal of craftsman {craftsman_id} set to {amount:.2f}")
        return self.get_stats(craftsman_id)
