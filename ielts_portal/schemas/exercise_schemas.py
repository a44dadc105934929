from datetime import datetime
from typing import Annotated, Literal, Union
from uuid import uuid4
from pydantic import BaseModel, Field, TypeAdapter, field_validator

from ielts_portal.models.exercise import ExerciseTask, ExerciseType


def new_item_id() -> str:
    return uuid4().hex


class ItemValue(BaseModel):
    """Id/value pair used by matching groups, QA questions and MCQ options"""

    id: str = Field(default_factory=new_item_id, min_length=1, max_length=64)
    value: str = Field(default="", max_length=2000)


class BlankEntry(BaseModel):
    """Sentence with one or more blanks between text_before and text_after"""

    id: str = Field(default_factory=new_item_id, min_length=1, max_length=64)
    text_before: str = Field(default="", max_length=2000)
    num_blanks: int = Field(default=1, ge=1, le=20)
    text_after: str | None = Field(default=None, max_length=2000)


class MCQQuestion(BaseModel):
    id: str = Field(default_factory=new_item_id, min_length=1, max_length=64)
    question_text: str = Field(..., min_length=1, max_length=2000)
    options: list[ItemValue] = Field(..., min_length=1)


class TaskBase(BaseModel):
    """Fields shared by every task variant"""

    id: str = Field(default_factory=new_item_id, min_length=1, max_length=32)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    allowed_time: int = Field(default=10, ge=1, description="Minutes")


class MatchingTask(TaskBase):
    task_type: Literal["Matching"]
    group1: list[ItemValue] = Field(..., min_length=1)
    group2: list[ItemValue] = Field(..., min_length=1)


class FillingBlanksTask(TaskBase):
    task_type: Literal["Filling Blanks"]
    max_words_per_blank: int = Field(default=1, ge=1)
    blanks: list[BlankEntry] = Field(..., min_length=1)


class MCQTask(TaskBase):
    task_type: Literal["MCQ"]
    allow_multiple_selections: bool = False
    questions: list[MCQQuestion] = Field(..., min_length=1)


class QATask(TaskBase):
    task_type: Literal["QA"]
    max_words_per_answer: int = Field(default=20, ge=1)
    questions: list[ItemValue] = Field(..., min_length=1)


class WritingTask(TaskBase):
    task_type: Literal["Writing"]
    minimum_word_count: int = Field(default=150, ge=1)


Task = Annotated[
    Union[MatchingTask, FillingBlanksTask, MCQTask, QATask, WritingTask],
    Field(discriminator="task_type"),
]

COMMON_TASK_FIELDS = frozenset(TaskBase.model_fields) | {"task_type"}


class ExerciseDetails(BaseModel):
    """Exercise fields editable from the exercise form"""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    allowed_time: int = Field(default=40, ge=1, description="Minutes")
    passage: str | None = None
    image_url: str | None = Field(None, max_length=1024)
    recording_url: str | None = Field(None, max_length=1024)


class ExerciseCreate(ExerciseDetails):
    """Schema for creating an exercise together with its tasks"""

    exercise_type: ExerciseType
    tasks: list[Task] = Field(default_factory=list)


class ExerciseUpdate(ExerciseDetails):
    """Full replacement of details and tasks; the exercise type is fixed"""

    tasks: list[Task] = Field(default_factory=list)


class ExerciseResponse(BaseModel):
    """Schema for exercise response"""

    id: int
    exercise_type: ExerciseType
    title: str
    description: str
    allowed_time: int
    passage: str | None
    image_url: str | None
    recording_url: str | None
    tasks: list[Task]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("tasks", mode="before")
    @classmethod
    def flatten_task_rows(cls, value):
        if value is None:
            return []
        return [task.to_payload() if isinstance(task, ExerciseTask) else task for task in value]


class ExerciseListResponse(BaseModel):
    """Schema for list of exercises"""

    exercises: list[ExerciseResponse]
    total: int


class ExerciseDeleteResponse(BaseModel):
    message: str
    deleted_exercise_id: int


task_adapter: TypeAdapter[Task] = TypeAdapter(Task)
