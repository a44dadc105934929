from sqlalchemy import String, Integer, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING, Any

from ielts_portal.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from ielts_portal.models.managed_account import ManagedAccount
    from ielts_portal.models.exercise import ExerciseTask


class TaskAnswer(Base, TimestampMixin):
    """
    Answers one principal saved for one task in the task workspace.

    The answers JSON shape depends on the task type (see
    ielts_portal.services.workspace_service). Saving again overwrites.
    """

    __tablename__ = "task_answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exercise_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("exercises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    task_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("exercise_tasks.id", ondelete="CASCADE"),
        nullable=False,
    )
    answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Relationships
    user: Mapped["ManagedAccount"] = relationship("ManagedAccount", back_populates="answers")
    task: Mapped["ExerciseTask"] = relationship("ExerciseTask", back_populates="answers")

    __table_args__ = (
        UniqueConstraint("user_id", "task_id", name="uq_answer_user_task"),
    )
