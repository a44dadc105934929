"""Portal session: the explicit lifetime of one login."""

from datetime import datetime
from sqlalchemy import String, Integer, ForeignKey, Enum, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from ielts_portal.models.base import Base, TimestampMixin
from ielts_portal.core.navigation import Page, ExerciseMode, ViewState

if TYPE_CHECKING:
    from ielts_portal.models.managed_account import ManagedAccount


class PortalSession(Base, TimestampMixin):
    """
    One authenticated session of a principal.

    Created at login and ended at logout (ended_at set). Tokens carry the
    session id, so an ended session invalidates its token immediately.
    The row also stores the view router state of the session.
    """

    __tablename__ = "portal_sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    current_page: Mapped[Page] = mapped_column(
        Enum(Page, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=Page.DASHBOARD,
    )
    exercise_mode: Mapped[ExerciseMode] = mapped_column(
        Enum(ExerciseMode, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ExerciseMode.LIST,
    )
    editing_exercise_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    user: Mapped["ManagedAccount"] = relationship("ManagedAccount", back_populates="sessions")

    @property
    def view_state(self) -> ViewState:
        return ViewState(
            page=self.current_page,
            exercise_mode=self.exercise_mode,
            editing_exercise_id=self.editing_exercise_id,
        )

    def apply_view_state(self, state: ViewState) -> None:
        self.current_page = state.page
        self.exercise_mode = state.exercise_mode
        self.editing_exercise_id = state.editing_exercise_id

    def __repr__(self) -> str:
        return f"<PortalSession(id='{self.id}', user_id={self.user_id}, page={self.current_page.value})>"
