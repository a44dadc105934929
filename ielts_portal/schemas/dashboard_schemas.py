from datetime import datetime
from pydantic import BaseModel


class ActivityResponse(BaseModel):
    """Recent activity entry"""

    id: int
    actor: str
    message: str
    created_at: datetime

    model_config = {"from_attributes": True}


class DashboardResponse(BaseModel):
    """Headline numbers and recent activity"""

    total_users: int
    active_users: int
    total_exercises: int
    exercises_by_type: dict[str, int]
    recent_activity: list[ActivityResponse]
