from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ielts_portal.database import get_db
from ielts_portal.dependencies import get_session_context
from ielts_portal.models.principal import SessionContext
from ielts_portal.services.workspace_service import WorkspaceService
from ielts_portal.schemas.workspace_schemas import (
    AnswerSaveRequest,
    AnswerSaveResponse,
    WorkspaceExerciseDetail,
    WorkspaceExerciseListResponse,
)

router = APIRouter()


@router.get("/exercises", response_model=WorkspaceExerciseListResponse)
def list_workspace_exercises(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Exercises with the principal's progress (every role)"""
    service = WorkspaceService(db)
    exercises = service.list_exercises(context)
    return {"exercises": exercises, "total": len(exercises)}


@router.get("/exercises/{exercise_id}", response_model=WorkspaceExerciseDetail)
def get_workspace_exercise(
    exercise_id: int,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Exercise with saved answers and per-task status"""
    service = WorkspaceService(db)
    return service.get_exercise(exercise_id, context)


@router.put("/exercises/{exercise_id}/tasks/{task_id}/answers", response_model=AnswerSaveResponse)
def save_task_answers(
    exercise_id: int,
    task_id: str,
    data: AnswerSaveRequest,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """
    Save answers for one task.

    - Shape depends on the task type
    - Saving again overwrites the previous answers
    """
    service = WorkspaceService(db)
    return service.save_answers(exercise_id, task_id, data.answers, context)
