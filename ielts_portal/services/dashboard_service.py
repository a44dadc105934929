from sqlalchemy.orm import Session

from ielts_portal.models.exercise import ExerciseType
from ielts_portal.repositories.exercise_repository import ExerciseRepository
from ielts_portal.repositories.user_repository import UserRepository
from ielts_portal.services.activity_service import ActivityService


class DashboardService:
    """Headline numbers for the dashboard (every authenticated role)"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.exercise_repo = ExerciseRepository(db)
        self.activity = ActivityService(db)

    def summary(self) -> dict:
        by_type = self.exercise_repo.count_by_type()
        return {
            "total_users": self.user_repo.count(),
            "active_users": self.user_repo.count(active_only=True),
            "total_exercises": self.exercise_repo.count(),
            "exercises_by_type": {
                exercise_type.value: by_type.get(exercise_type, 0) for exercise_type in ExerciseType
            },
            "recent_activity": self.activity.recent(),
        }
