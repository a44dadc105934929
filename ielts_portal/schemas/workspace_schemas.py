from typing import Any
from pydantic import BaseModel, Field

from ielts_portal.models.exercise import ExerciseType
from ielts_portal.schemas.exercise_schemas import ExerciseResponse


class AnswerSaveRequest(BaseModel):
    """Answers for one task; the shape depends on the task type"""

    answers: dict[str, Any] = Field(default_factory=dict)


class TaskStatus(BaseModel):
    task_id: str
    task_type: str
    answered: bool
    word_count: int | None = None  # Writing tasks only
    required_words: int | None = None  # Writing tasks only


class AnswerSaveResponse(BaseModel):
    task_id: str
    answers: dict[str, Any]
    status: TaskStatus


class WorkspaceExerciseSummary(BaseModel):
    """Exercise card in the workspace list"""

    id: int
    exercise_type: ExerciseType
    title: str
    description: str
    allowed_time: int
    total_tasks: int
    answered_tasks: int


class WorkspaceExerciseListResponse(BaseModel):
    exercises: list[WorkspaceExerciseSummary]
    total: int


class WorkspaceExerciseDetail(BaseModel):
    """Exercise with the principal's saved answers"""

    exercise: ExerciseResponse
    answers: dict[str, dict[str, Any]]
    statuses: list[TaskStatus]
