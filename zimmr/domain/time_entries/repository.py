"""Time entry repository"""

from sqlalchemy.orm import Session

from ...models import TimeEntry


class TimeEntryRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for_craftsman(self, craftsman_id: int) -> list[TimeEntry]:
        return (
            self.db.query(TimeEntry)
            .filter(TimeEntry.craftsman_id == craftsman_id)
            .order_by(TimeEntry.start_time.desc(), TimeEntry.id.desc())
            .all()
        )

    def create(self, craftsman_id: int, **entry_data) -> TimeEntry:
        entry = TimeEntry(craftsman_id=craftsman_id, **entry_data)
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry
