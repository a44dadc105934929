import logging
from uuid import uuid4
from sqlalchemy.orm import Session

from ielts_portal.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ielts_portal.core.navigation import EXERCISE_FORM_MINIMUM_ROLE
from ielts_portal.models.exercise import Exercise, ExerciseTask, ExerciseType, TaskType
from ielts_portal.models.principal import SessionContext
from ielts_portal.repositories.exercise_repository import ExerciseRepository
from ielts_portal.repositories.session_repository import SessionRepository
from ielts_portal.schemas.exercise_schemas import (
    COMMON_TASK_FIELDS,
    ExerciseCreate,
    ExerciseDetails,
    ExerciseUpdate,
    Task,
)
from ielts_portal.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

NO_TASKS = "Please add at least one task before saving."

PASSAGE_TYPES = frozenset({ExerciseType.READING, ExerciseType.WRITING})
IMAGE_TYPES = frozenset({ExerciseType.READING})
RECORDING_TYPES = frozenset({ExerciseType.LISTENING, ExerciseType.SPEAKING})


def apply_details(exercise: Exercise, details: ExerciseDetails) -> None:
    """Copy form fields, dropping media the exercise type does not use."""
    exercise.title = details.title
    exercise.description = details.description
    exercise.allowed_time = details.allowed_time
    exercise.passage = details.passage if exercise.exercise_type in PASSAGE_TYPES else None
    exercise.image_url = details.image_url if exercise.exercise_type in IMAGE_TYPES else None
    exercise.recording_url = details.recording_url if exercise.exercise_type in RECORDING_TYPES else None


def fill_task_row(row: ExerciseTask, task: Task, position: int) -> ExerciseTask:
    """Write a validated task into its row (common columns + variant JSON)."""
    task_type = TaskType(task.task_type)
    if row.task_type is not None and row.task_type != task_type:
        # Saved answers no longer fit the new variant
        row.answers.clear()
    row.position = position
    row.task_type = task_type
    row.title = task.title
    row.description = task.description
    row.allowed_time = task.allowed_time
    row.content = task.model_dump(mode="json", exclude=set(COMMON_TASK_FIELDS))
    return row


class ExerciseService:
    """Service layer for Exercises Management business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ExerciseRepository(db)
        self.session_repo = SessionRepository(db)
        self.activity = ActivityService(db)

    def _require_editor(self, context: SessionContext) -> None:
        if not context.has_permission(EXERCISE_FORM_MINIMUM_ROLE):
            logger.warning(
                "Role %s denied exercise management for user %s",
                context.principal.role.value,
                context.principal.id,
            )
            raise ForbiddenException("Exercises Management requires Editor or higher")

    def _free_task_id(self, candidate: str, own_ids: set[str], taken: set[str]) -> str:
        """Keep the client's id unless another exercise already uses it."""
        if candidate in own_ids or candidate not in taken:
            return candidate
        return uuid4().hex

    def _sync_tasks(self, exercise: Exercise, tasks: list[Task]) -> None:
        """
        Replace the exercise's task list, keeping rows whose id survives.

        Kept rows keep their saved answers; dropped rows lose them.
        """
        if not tasks:
            raise ValidationException(NO_TASKS)

        existing = {row.id: row for row in exercise.tasks}
        taken = self.repo.existing_task_ids([task.id for task in tasks])
        seen: set[str] = set()
        rows: list[ExerciseTask] = []

        for position, task in enumerate(tasks):
            task_id = self._free_task_id(task.id, set(existing), taken)
            if task_id in seen:
                task_id = uuid4().hex
            seen.add(task_id)

            row = existing.get(task_id) or ExerciseTask(id=task_id)
            rows.append(fill_task_row(row, task, position))

        exercise.tasks = rows

    def _get(self, exercise_id: int) -> Exercise:
        exercise = self.repo.get_by_id(exercise_id)
        if exercise is None:
            raise NotFoundException(f"Exercise {exercise_id} not found")
        return exercise

    def list_exercises(self, context: SessionContext, exercise_type: ExerciseType | None = None) -> list[Exercise]:
        """Get exercises, optionally for one module"""
        self._require_editor(context)
        return self.repo.get_all(exercise_type)

    def get_exercise(self, exercise_id: int, context: SessionContext) -> Exercise:
        self._require_editor(context)
        return self._get(exercise_id)

    def create_exercise(self, data: ExerciseCreate, context: SessionContext) -> Exercise:
        """
        Create an exercise with its tasks.

        Raises:
            ForbiddenException: Principal is below Editor
            ValidationException: No tasks given
        """
        self._require_editor(context)

        exercise = Exercise(exercise_type=data.exercise_type)
        self._sync_tasks(exercise, data.tasks)
        apply_details(exercise, data)
        exercise = self.repo.create(exercise)

        self.activity.log_activity(
            context.principal.display_name,
            f"created {exercise.exercise_type.value} exercise '{exercise.title}'",
        )
        return exercise

    def update_exercise(self, exercise_id: int, data: ExerciseUpdate, context: SessionContext) -> Exercise:
        """
        Replace details and tasks of an exercise. The type never changes.

        Raises:
            NotFoundException: Unknown exercise
            ValidationException: No tasks given
        """
        self._require_editor(context)
        exercise = self._get(exercise_id)

        self._sync_tasks(exercise, data.tasks)
        apply_details(exercise, data)
        exercise = self.repo.update(exercise)

        self.activity.log_activity(context.principal.display_name, f"updated exercise '{exercise.title}'")
        return exercise

    def delete_exercise(self, exercise_id: int, context: SessionContext) -> None:
        """Delete an exercise; sessions editing it go back to the list."""
        self._require_editor(context)
        exercise = self._get(exercise_id)
        title = exercise.title

        self.repo.delete(exercise)
        self.session_repo.clear_editing_exercise(exercise_id)
        self.activity.log_activity(context.principal.display_name, f"deleted exercise '{title}'")

    def add_task(self, exercise_id: int, task: Task, context: SessionContext) -> Exercise:
        self._require_editor(context)
        exercise = self._get(exercise_id)

        own_ids = {row.id for row in exercise.tasks}
        task_id = task.id
        if task_id in own_ids or self.repo.existing_task_ids([task_id]):
            task_id = uuid4().hex

        exercise.tasks.append(fill_task_row(ExerciseTask(id=task_id), task, len(exercise.tasks)))
        return self.repo.update(exercise)

    def update_task(self, exercise_id: int, task_id: str, task: Task, context: SessionContext) -> Exercise:
        """Replace one task, keeping its id (and so its saved answers)."""
        self._require_editor(context)
        exercise = self._get(exercise_id)

        row = next((row for row in exercise.tasks if row.id == task_id), None)
        if row is None:
            raise NotFoundException(f"Task {task_id} not found in exercise {exercise_id}")

        fill_task_row(row, task, row.position)
        return self.repo.update(exercise)

    def remove_task(self, exercise_id: int, task_id: str, context: SessionContext) -> Exercise:
        self._require_editor(context)
        exercise = self._get(exercise_id)

        remaining = [row for row in exercise.tasks if row.id != task_id]
        if len(remaining) == len(exercise.tasks):
            raise NotFoundException(f"Task {task_id} not found in exercise {exercise_id}")
        if not remaining:
            raise ValidationException(NO_TASKS)

        for position, row in enumerate(remaining):
            row.position = position
        exercise.tasks = remaining
        return self.repo.update(exercise)
