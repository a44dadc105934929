import logging
from sqlalchemy.orm import Session

from ielts_portal.core import navigation
from ielts_portal.core.exceptions import NotFoundException
from ielts_portal.core.navigation import MenuItem, RouteDecision, ViewState
from ielts_portal.models.principal import SessionContext
from ielts_portal.repositories.exercise_repository import ExerciseRepository
from ielts_portal.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class NavigationService:
    """
    Applies the view router to the principal's persisted session.

    Authorization failures never raise here: the router redirects to the
    dashboard and the response says so.
    """

    def __init__(self, db: Session):
        self.db = db
        self.session_repo = SessionRepository(db)
        self.exercise_repo = ExerciseRepository(db)

    def _store(self, context: SessionContext, state: ViewState) -> ViewState:
        if state != context.session.view_state:
            context.session.apply_view_state(state)
            self.session_repo.update(context.session)
        return state

    def current_state(self, context: SessionContext) -> ViewState:
        """Stored state, re-checked against the principal's current role."""
        state = navigation.revalidate(context.session.view_state, context.principal.role)
        return self._store(context, state)

    def menu(self, context: SessionContext) -> list[MenuItem]:
        return navigation.build_menu(context.principal.role)

    def navigate(self, page_key: str, context: SessionContext) -> tuple[RouteDecision, ViewState]:
        """
        Move the session to the requested page.

        Returns:
            Tuple of (decision, new state)
        """
        state, decision = navigation.navigate(self.current_state(context), context.principal.role, page_key)
        return decision, self._store(context, state)

    def open_exercise_form(
        self, exercise_id: int | None, context: SessionContext
    ) -> tuple[RouteDecision, ViewState]:
        """
        Open the exercise form on the current module.

        Raises:
            NotFoundException: exercise_id does not name an exercise of the current module
        """
        current = self.current_state(context)

        if exercise_id is not None and current.is_exercise_page:
            exercise = self.exercise_repo.get_by_id(exercise_id)
            if exercise is None or exercise.exercise_type.value != current.page.value:
                raise NotFoundException(f"Exercise {exercise_id} not found in {current.page.value}")

        state, decision = navigation.open_exercise_form(current, context.principal.role, exercise_id)
        return decision, self._store(context, state)

    def close_exercise_form(self, context: SessionContext) -> ViewState:
        state = navigation.close_exercise_form(self.current_state(context))
        return self._store(context, state)
