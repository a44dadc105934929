from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ielts_portal.database import get_db
from ielts_portal.dependencies import get_session_context
from ielts_portal.models.principal import SessionContext
from ielts_portal.services.navigation_service import NavigationService
from ielts_portal.schemas.navigation_schemas import (
    ExerciseFormRequest,
    NavigateRequest,
    NavigationResponse,
    RouteDecisionResponse,
    ViewStateResponse,
)

router = APIRouter()


def _decision_response(decision, state) -> RouteDecisionResponse:
    return RouteDecisionResponse(
        page=decision.page,
        requested=decision.requested,
        redirected=decision.redirected,
        state=ViewStateResponse.model_validate(state),
    )


@router.get("", response_model=NavigationResponse)
def get_navigation(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Current screen and the sidebar menu with access flags"""
    service = NavigationService(db)
    return {
        "state": ViewStateResponse.model_validate(service.current_state(context)),
        "menu": service.menu(context),
    }


@router.post("", response_model=RouteDecisionResponse)
def navigate(
    request: NavigateRequest,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """
    Go to a page.

    Pages above the principal's role, and unknown pages, land on the
    Dashboard with redirected=true. Never an error.
    """
    service = NavigationService(db)
    decision, state = service.navigate(request.page, context)
    return _decision_response(decision, state)


@router.post("/exercise-form", response_model=RouteDecisionResponse)
def open_exercise_form(
    request: ExerciseFormRequest,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Open the exercise form of the current module (null exercise_id creates)"""
    service = NavigationService(db)
    decision, state = service.open_exercise_form(request.exercise_id, context)
    return _decision_response(decision, state)


@router.delete("/exercise-form", response_model=ViewStateResponse)
def close_exercise_form(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Back to the module's list"""
    service = NavigationService(db)
    return ViewStateResponse.model_validate(service.close_exercise_form(context))
