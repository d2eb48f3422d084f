"""Call log repository"""

from sqlalchemy.orm import Session

from ...models import Call


class CallRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, **call_data) -> Call:
        call = Call(**call_data)
        self.db.add(call)
        self.db.commit()
        self.db.refresh(call)
        return call

    def list_for_craftsman(self, craftsman_id: int, limit: int = 100) -> list[Call]:
        return (
            self.db.query(Call)
            .filter(Call.craftsman_id == craftsman_id)
            .order_by(Call.created_at.desc(), Call.id.desc())
            .limit(limit)
            .all()
        )
