"""Repository for PortalSession model operations."""

from sqlalchemy.orm import Session
from ielts_portal.models.base import utcnow
from ielts_portal.core.navigation import ExerciseMode
from ielts_portal.models.portal_session import PortalSession


class SessionRepository:
    """Repository for PortalSession model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_active(self, session_id: str, user_id: int) -> PortalSession | None:
        """
        Get a session that belongs to the user and has not ended.

        Args:
            session_id: Session ID from the token 'sid' claim
            user_id: Account ID from the token 'sub' claim

        Returns:
            PortalSession or None
        """
        return (
            self.db.query(PortalSession)
            .filter(
                PortalSession.id == session_id,
                PortalSession.user_id == user_id,
                PortalSession.ended_at.is_(None),
            )
            .first()
        )

    def create(self, portal_session: PortalSession) -> PortalSession:
        self.db.add(portal_session)
        self.db.commit()
        self.db.refresh(portal_session)
        return portal_session

    def update(self, portal_session: PortalSession) -> PortalSession:
        self.db.commit()
        self.db.refresh(portal_session)
        return portal_session

    def end(self, portal_session: PortalSession) -> PortalSession:
        """Mark the session as ended (logout)."""
        portal_session.ended_at = utcnow()
        return self.update(portal_session)

    def clear_editing_exercise(self, exercise_id: int) -> None:
        """Send every active session editing this exercise back to the list view."""
        sessions = (
            self.db.query(PortalSession)
            .filter(
                PortalSession.editing_exercise_id == exercise_id,
                PortalSession.ended_at.is_(None),
            )
            .all()
        )
        for portal_session in sessions:
            portal_session.exercise_mode = ExerciseMode.LIST
            portal_session.editing_exercise_id = None
        self.db.commit()
