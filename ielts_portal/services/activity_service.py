import logging
from sqlalchemy.orm import Session

from ielts_portal.config import settings
from ielts_portal.models.activity_entry import ActivityEntry
from ielts_portal.repositories.activity_repository import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityService:
    """Recent-activity feed of the dashboard"""

    def __init__(self, db: Session, limit: int | None = None):
        self.db = db
        self.repo = ActivityRepository(db)
        self.limit = limit if limit is not None else settings.ACTIVITY_LOG_LIMIT

    def log_activity(self, actor: str, message: str) -> ActivityEntry:
        """
        Record what a principal did, keeping only the newest entries.

        Args:
            actor: Display name of the acting principal
            message: What happened, e.g. "created new user 'Jane Roe' with role 'Editor'"

        Returns:
            Stored entry
        """
        logger.info("%s %s", actor, message)
        return self.repo.add(ActivityEntry(actor=actor, message=message), keep=self.limit)

    def recent(self) -> list[ActivityEntry]:
        return self.repo.latest(self.limit)
