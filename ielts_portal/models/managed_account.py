from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from ielts_portal.models.base import Base, TimestampMixin
from ielts_portal.core.roles import Role

if TYPE_CHECKING:
    from ielts_portal.models.portal_session import PortalSession
    from ielts_portal.models.task_answer import TaskAnswer


class ManagedAccount(Base, TimestampMixin):
    """
    Application user administered through the Users Management screen.

    The same row backs the Principal when this person logs in, but the
    two are kept apart in code: ManagedAccount is the record, Principal
    is the authenticated actor of one session.

    role is stored as a plain string so that legacy or hand-edited
    values survive a round trip; ielts_portal.core.roles decides what
    they are worth.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default=Role.USER.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    referral_code: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    referred_by: Mapped[str | None] = mapped_column(String(32), nullable=True)
    discount_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Percentage, None for no discount

    # Audit fields (display names of the acting principal)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, default="system")
    edited_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    edited_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    sessions: Mapped[list["PortalSession"]] = relationship(
        "PortalSession",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    answers: Mapped[list["TaskAnswer"]] = relationship(
        "TaskAnswer",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<ManagedAccount(id={self.id}, email='{self.email}', role={self.role})>"
