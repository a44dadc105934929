from sqlalchemy import String, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from ielts_portal.models.base import Base, TimestampMixin


class ActivityEntry(Base, TimestampMixin):
    """Recent-activity line shown on the dashboard (only the newest few are kept)."""

    __tablename__ = "activity_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actor: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
