"""
View router for the portal screens.

Decides which page a principal lands on for a requested page key. Access
is driven by the PAGE_ACCESS table; a request the principal's role does
not satisfy is redirected to the dashboard instead of failing.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum as PyEnum

from ielts_portal.core.roles import Role, has_minimum_role

logger = logging.getLogger(__name__)


class Page(str, PyEnum):
    """Named screens of the portal."""

    DASHBOARD = "Dashboard"
    USERS_MANAGEMENT = "Users Management"
    SUBSCRIPTIONS = "Subscriptions"
    READING = "Reading"
    WRITING = "Writing"
    LISTENING = "Listening"
    SPEAKING = "Speaking"
    TASK_WORKSPACE = "Task Workspace"


class ExerciseMode(str, PyEnum):
    """Sub-state of an exercise module page."""

    LIST = "list"
    FORM = "form"


EXERCISE_PAGES = frozenset({Page.READING, Page.WRITING, Page.LISTENING, Page.SPEAKING})

# Minimum role per page, in menu order
PAGE_ACCESS: dict[Page, Role] = {
    Page.DASHBOARD: Role.USER,
    Page.USERS_MANAGEMENT: Role.EDITOR,
    Page.SUBSCRIPTIONS: Role.ADMIN,
    Page.READING: Role.EDITOR,
    Page.WRITING: Role.EDITOR,
    Page.LISTENING: Role.EDITOR,
    Page.SPEAKING: Role.EDITOR,
    Page.TASK_WORKSPACE: Role.USER,
}

EXERCISE_FORM_MINIMUM_ROLE = Role.EDITOR
EXERCISE_FORM_KEY = "Exercise Form"

FALLBACK_PAGE = Page.DASHBOARD


@dataclass(frozen=True)
class ViewState:
    """What the principal is currently looking at."""

    page: Page = Page.DASHBOARD
    exercise_mode: ExerciseMode = ExerciseMode.LIST
    editing_exercise_id: int | None = None

    @property
    def is_exercise_page(self) -> bool:
        return self.page in EXERCISE_PAGES


@dataclass(frozen=True)
class RouteDecision:
    """Outcome of a navigation request."""

    page: Page
    requested: str
    redirected: bool


@dataclass(frozen=True)
class MenuItem:
    page: Page
    minimum_role: Role
    allowed: bool


def initial_state() -> ViewState:
    """Every session starts on the dashboard, whatever the role."""
    return ViewState()


def parse_page(value: "Page | str") -> Page | None:
    if isinstance(value, Page):
        return value
    try:
        return Page(value)
    except ValueError:
        return None


def can_access(role: "Role | str | None", page: Page) -> bool:
    return has_minimum_role(role, PAGE_ACCESS[page])


def resolve_page(role: "Role | str | None", requested: "Page | str") -> RouteDecision:
    """
    Decide which page to show for a requested page key.

    Unknown keys and pages above the role's rank resolve to the dashboard.
    Never raises.
    """
    requested_key = requested.value if isinstance(requested, Page) else str(requested)
    page = parse_page(requested)

    if page is None:
        logger.warning("Unknown page %r requested, redirecting to %s", requested_key, FALLBACK_PAGE.value)
        return RouteDecision(page=FALLBACK_PAGE, requested=requested_key, redirected=True)

    if not can_access(role, page):
        role_name = role.value if isinstance(role, Role) else role
        logger.warning(
            "Role %r denied access to %s, redirecting to %s",
            role_name,
            page.value,
            FALLBACK_PAGE.value,
        )
        return RouteDecision(page=FALLBACK_PAGE, requested=requested_key, redirected=True)

    return RouteDecision(page=page, requested=requested_key, redirected=False)


def navigate(state: ViewState, role: "Role | str | None", requested: "Page | str") -> tuple[ViewState, RouteDecision]:
    """
    Move to the requested page.

    Changing page drops any open exercise form.
    """
    decision = resolve_page(role, requested)
    if decision.page == state.page:
        return state, decision
    return ViewState(page=decision.page), decision


def revalidate(state: ViewState, role: "Role | str | None") -> ViewState:
    """Re-check a stored state against the principal's current role."""
    if not can_access(role, state.page):
        logger.warning("Stored page %s no longer allowed, resetting to %s", state.page.value, FALLBACK_PAGE.value)
        return initial_state()
    if state.exercise_mode is ExerciseMode.FORM and not has_minimum_role(role, EXERCISE_FORM_MINIMUM_ROLE):
        return replace(state, exercise_mode=ExerciseMode.LIST, editing_exercise_id=None)
    return state


def open_exercise_form(
    state: ViewState, role: "Role | str | None", exercise_id: int | None = None
) -> tuple[ViewState, RouteDecision]:
    """
    Switch the current exercise module to its form sub-state.

    exercise_id None means creating a new exercise.
    """
    if not has_minimum_role(role, EXERCISE_FORM_MINIMUM_ROLE):
        logger.warning("Role %r denied access to the exercise form, redirecting to %s", role, FALLBACK_PAGE.value)
        return initial_state(), RouteDecision(page=FALLBACK_PAGE, requested=EXERCISE_FORM_KEY, redirected=True)

    if not state.is_exercise_page:
        logger.warning("Exercise form requested outside an exercise module (page %s)", state.page.value)
        return state, RouteDecision(page=state.page, requested=EXERCISE_FORM_KEY, redirected=True)

    new_state = replace(state, exercise_mode=ExerciseMode.FORM, editing_exercise_id=exercise_id)
    return new_state, RouteDecision(page=state.page, requested=EXERCISE_FORM_KEY, redirected=False)


def close_exercise_form(state: ViewState) -> ViewState:
    """Back to the module's list view."""
    return replace(state, exercise_mode=ExerciseMode.LIST, editing_exercise_id=None)


def build_menu(role: "Role | str | None") -> list[MenuItem]:
    """Sidebar entries with their access flag for this role."""
    return [
        MenuItem(page=page, minimum_role=minimum, allowed=has_minimum_role(role, minimum))
        for page, minimum in PAGE_ACCESS.items()
    ]
