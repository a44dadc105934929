from typing import Optional
from fastapi import APIRouter, Body, Depends, Query
from fastapi import status
from sqlalchemy.orm import Session

from ielts_portal.database import get_db
from ielts_portal.dependencies import get_session_context
from ielts_portal.models.exercise import ExerciseType
from ielts_portal.models.principal import SessionContext
from ielts_portal.services.exercise_service import ExerciseService
from ielts_portal.schemas.exercise_schemas import (
    ExerciseCreate,
    ExerciseDeleteResponse,
    ExerciseListResponse,
    ExerciseResponse,
    ExerciseUpdate,
    Task,
)

router = APIRouter()


@router.get("", response_model=ExerciseListResponse)
def list_exercises(
    exercise_type: Optional[ExerciseType] = Query(None, description="Filter by module"),
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """List exercises (Editor or higher)"""
    service = ExerciseService(db)
    exercises = service.list_exercises(context, exercise_type)
    return ExerciseListResponse(
        exercises=[ExerciseResponse.model_validate(exercise) for exercise in exercises],
        total=len(exercises),
    )


@router.get("/{exercise_id}", response_model=ExerciseResponse)
def get_exercise(
    exercise_id: int,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    service = ExerciseService(db)
    return ExerciseResponse.model_validate(service.get_exercise(exercise_id, context))


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
def create_exercise(
    data: ExerciseCreate,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """
    Create an exercise.

    - **Requires Editor or higher**
    - At least one task is required
    - Media fields the module does not use are dropped
    """
    service = ExerciseService(db)
    return ExerciseResponse.model_validate(service.create_exercise(data, context))


@router.put("/{exercise_id}", response_model=ExerciseResponse)
def update_exercise(
    exercise_id: int,
    data: ExerciseUpdate,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Replace details and tasks; tasks keep their answers when their id is kept"""
    service = ExerciseService(db)
    return ExerciseResponse.model_validate(service.update_exercise(exercise_id, data, context))


@router.delete("/{exercise_id}", response_model=ExerciseDeleteResponse)
def delete_exercise(
    exercise_id: int,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    service = ExerciseService(db)
    service.delete_exercise(exercise_id, context)
    return {"message": "Exercise deleted successfully", "deleted_exercise_id": exercise_id}


@router.post("/{exercise_id}/tasks", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
def add_task(
    exercise_id: int,
    task: Task = Body(...),
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Append a task to an exercise"""
    service = ExerciseService(db)
    return ExerciseResponse.model_validate(service.add_task(exercise_id, task, context))


@router.put("/{exercise_id}/tasks/{task_id}", response_model=ExerciseResponse)
def update_task(
    exercise_id: int,
    task_id: str,
    task: Task = Body(...),
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Replace one task; its id is kept"""
    service = ExerciseService(db)
    return ExerciseResponse.model_validate(service.update_task(exercise_id, task_id, task, context))


@router.delete("/{exercise_id}/tasks/{task_id}", response_model=ExerciseResponse)
def remove_task(
    exercise_id: int,
    task_id: str,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Remove a task; the last task of an exercise cannot be removed"""
    service = ExerciseService(db)
    return ExerciseResponse.model_validate(service.remove_task(exercise_id, task_id, context))
