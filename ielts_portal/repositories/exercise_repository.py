from sqlalchemy import func
from sqlalchemy.orm import Session
from ielts_portal.models.exercise import Exercise, ExerciseTask, ExerciseType


class ExerciseRepository:
    """Repository for Exercise and ExerciseTask model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, exercise_id: int) -> Exercise | None:
        return self.db.query(Exercise).filter(Exercise.id == exercise_id).first()

    def get_all(self, exercise_type: ExerciseType | None = None) -> list[Exercise]:
        """Get all exercises, optionally for one module, oldest first"""
        query = self.db.query(Exercise)
        if exercise_type is not None:
            query = query.filter(Exercise.exercise_type == exercise_type)
        return query.order_by(Exercise.id).all()

    def count(self) -> int:
        return self.db.query(Exercise).count()

    def count_by_type(self) -> dict[ExerciseType, int]:
        rows = (
            self.db.query(Exercise.exercise_type, func.count(Exercise.id))
            .group_by(Exercise.exercise_type)
            .all()
        )
        return {exercise_type: total for exercise_type, total in rows}

    def existing_task_ids(self, task_ids: list[str]) -> set[str]:
        """Which of these task IDs are already taken (by any exercise)"""
        if not task_ids:
            return set()
        rows = self.db.query(ExerciseTask.id).filter(ExerciseTask.id.in_(task_ids)).all()
        return {row[0] for row in rows}

    def create(self, exercise: Exercise) -> Exercise:
        """Create new exercise with its tasks"""
        self.db.add(exercise)
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    def update(self, exercise: Exercise) -> Exercise:
        """Persist changes to an exercise and its task list"""
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    def delete(self, exercise: Exercise) -> None:
        """Delete exercise (cascades to tasks and saved answers)"""
        self.db.delete(exercise)
        self.db.commit()
