from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Text, ForeignKey, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING, Any

from ielts_portal.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from ielts_portal.models.task_answer import TaskAnswer


class ExerciseType(str, PyEnum):
    """Exercise module enumeration"""

    READING = "Reading"
    WRITING = "Writing"
    LISTENING = "Listening"
    SPEAKING = "Speaking"


class TaskType(str, PyEnum):
    """Task variant enumeration"""

    MATCHING = "Matching"
    FILLING_BLANKS = "Filling Blanks"
    MCQ = "MCQ"
    QA = "QA"
    WRITING = "Writing"


class Exercise(Base, TimestampMixin):
    """
    Practice exercise of one IELTS module.

    Media fields depend on the module: passage for Reading/Writing,
    image_url for Reading, recording_url for Listening/Speaking.
    """

    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exercise_type: Mapped[ExerciseType] = mapped_column(
        Enum(ExerciseType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    allowed_time: Mapped[int] = mapped_column(Integer, nullable=False, default=40)
    # Minutes
    passage: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    recording_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Relationships
    tasks: Mapped[list["ExerciseTask"]] = relationship(
        "ExerciseTask",
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="ExerciseTask.position",
    )

    def __repr__(self) -> str:
        return f"<Exercise(id={self.id}, type={self.exercise_type.value}, title='{self.title}')>"


class ExerciseTask(Base, TimestampMixin):
    """
    Task nested in an exercise.

    Common fields are columns; the variant-specific fields (groups,
    blanks, questions, limits) live in the content JSON column and are
    validated by the task schemas.
    """

    __tablename__ = "exercise_tasks"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    exercise_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("exercises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    task_type: Mapped[TaskType] = mapped_column(
        Enum(TaskType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    allowed_time: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Relationships
    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="tasks")
    answers: Mapped[list["TaskAnswer"]] = relationship(
        "TaskAnswer",
        back_populates="task",
        cascade="all, delete-orphan",
    )

    def to_payload(self) -> dict[str, Any]:
        """Flatten into the shape the task schemas validate."""
        return {
            **(self.content or {}),
            "id": self.id,
            "task_type": self.task_type.value,
            "title": self.title,
            "description": self.description,
            "allowed_time": self.allowed_time,
        }
