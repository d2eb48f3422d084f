"""Finance repository - revenue goals and the invoice figures behind the overview"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import FinanceGoal, Invoice


class FinanceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_goal(self, craftsman_id: int, period: str) -> Optional[FinanceGoal]:
        return (
            self.db.query(FinanceGoal)
            .filter(FinanceGoal.craftsman_id == craftsman_id, FinanceGoal.goal_period == period)
            .first()
        )

    def create_goal(self, craftsman_id: int, period: str, amount: float) -> FinanceGoal:
        goal = FinanceGoal(craftsman_id=craftsman_id, goal_period=period, goal_amount=amount)
        self.db.add(goal)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(goal)
        return goal

    def update_goal(self, goal: FinanceGoal, amount: float) -> FinanceGoal:
        goal.goal_amount = amount
        self.db.commit()
        self.db.refresh(goal)
        return goal

    def invoices_created_between(self, craftsman_id: int, start: datetime, end: datetime) -> list:
        """(created_at, status, total_amount) rows with start <= created_at < end"""
        return (
            self.db.query(Invoice.created_at, Invoice.status, Invoice.total_amount)
            .filter(
                Invoice.craftsman_id == craftsman_id,
                Invoice.created_at >= start,
                Invoice.created_at < end,
            )
            .all()
        )
