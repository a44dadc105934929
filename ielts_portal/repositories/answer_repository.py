from sqlalchemy.orm import Session
from ielts_portal.models.task_answer import TaskAnswer


class AnswerRepository:
    """Repository for TaskAnswer model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int, task_id: str) -> TaskAnswer | None:
        return (
            self.db.query(TaskAnswer)
            .filter(TaskAnswer.user_id == user_id, TaskAnswer.task_id == task_id)
            .first()
        )

    def get_for_exercise(self, user_id: int, exercise_id: int) -> list[TaskAnswer]:
        """All answers a user saved for one exercise"""
        return (
            self.db.query(TaskAnswer)
            .filter(TaskAnswer.user_id == user_id, TaskAnswer.exercise_id == exercise_id)
            .all()
        )

    def get_for_user(self, user_id: int) -> list[TaskAnswer]:
        return self.db.query(TaskAnswer).filter(TaskAnswer.user_id == user_id).all()

    def save(self, answer: TaskAnswer) -> TaskAnswer:
        """Insert or update; the last write wins"""
        if answer.id is None:
            self.db.add(answer)
        self.db.commit()
        self.db.refresh(answer)
        return answer
