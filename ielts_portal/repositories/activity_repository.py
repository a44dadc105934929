from sqlalchemy.orm import Session
from ielts_portal.models.activity_entry import ActivityEntry


class ActivityRepository:
    """Repository for ActivityEntry model operations"""

    def __init__(self, db: Session):
        self.db = db

    def latest(self, limit: int) -> list[ActivityEntry]:
        """Newest entries first"""
        return (
            self.db.query(ActivityEntry)
            .order_by(ActivityEntry.id.desc())
            .limit(limit)
            .all()
        )

    def add(self, entry: ActivityEntry, keep: int) -> ActivityEntry:
        """
        Append an entry and drop everything beyond the newest `keep`.

        Args:
            entry: Entry to store
            keep: Number of entries to retain
        """
        self.db.add(entry)
        self.db.flush()

        stale_ids = [
            row[0]
            for row in self.db.query(ActivityEntry.id)
            .order_by(ActivityEntry.id.desc())
            .offset(keep)
            .all()
        ]
        if stale_ids:
            self.db.query(ActivityEntry).filter(ActivityEntry.id.in_(stale_ids)).delete(
                synchronize_session=False
            )

        self.db.commit()
        self.db.refresh(entry)
        return entry
