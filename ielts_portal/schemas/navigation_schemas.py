from pydantic import BaseModel, Field
from ielts_portal.core.navigation import Page, ExerciseMode
from ielts_portal.core.roles import Role


class ViewStateResponse(BaseModel):
    """Current screen of the session"""

    page: Page
    exercise_mode: ExerciseMode
    editing_exercise_id: int | None

    model_config = {"from_attributes": True}


class MenuItemResponse(BaseModel):
    """Sidebar entry"""

    page: Page
    minimum_role: Role
    allowed: bool

    model_config = {"from_attributes": True}


class NavigationResponse(BaseModel):
    state: ViewStateResponse
    menu: list[MenuItemResponse]


class NavigateRequest(BaseModel):
    """Requested page key; unknown keys are redirected, not rejected"""

    page: str = Field(..., min_length=1, max_length=100)


class ExerciseFormRequest(BaseModel):
    """Open the exercise form; null exercise_id creates a new exercise"""

    exercise_id: int | None = None


class RouteDecisionResponse(BaseModel):
    """Outcome of a navigation request"""

    page: Page
    requested: str
    redirected: bool
    state: ViewStateResponse
