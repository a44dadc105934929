"""Import every model so Base.metadata knows all tables."""

from ielts_portal.models.base import Base
from ielts_portal.models.managed_account import ManagedAccount
from ielts_portal.models.portal_session import PortalSession
from ielts_portal.models.exercise import Exercise, ExerciseTask
from ielts_portal.models.task_answer import TaskAnswer
from ielts_portal.models.activity_entry import ActivityEntry

__all__ = [
    "Base",
    "ManagedAccount",
    "PortalSession",
    "Exercise",
    "ExerciseTask",
    "TaskAnswer",
    "ActivityEntry",
]
