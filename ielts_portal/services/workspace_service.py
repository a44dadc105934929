"""
Task workspace: where principals answer exercise tasks.

Answers are validated against the task they belong to and saved per
principal and task. Saving again overwrites (last write wins).
"""

import logging
from typing import Any
from sqlalchemy.orm import Session

from ielts_portal.core.exceptions import NotFoundException, ValidationException
from ielts_portal.models.exercise import Exercise, ExerciseTask
from ielts_portal.models.principal import SessionContext
from ielts_portal.models.task_answer import TaskAnswer
from ielts_portal.repositories.answer_repository import AnswerRepository
from ielts_portal.repositories.exercise_repository import ExerciseRepository
from ielts_portal.schemas.exercise_schemas import (
    ExerciseResponse,
    FillingBlanksTask,
    MatchingTask,
    MCQTask,
    QATask,
    Task,
    WritingTask,
    task_adapter,
)
from ielts_portal.schemas.workspace_schemas import TaskStatus

logger = logging.getLogger(__name__)

WRITING_AREA = "writing_area"


def count_words(text: str | None) -> int:
    return len(text.split()) if text else 0


def blank_key(entry_id: str, index: int) -> str:
    return f"{entry_id}_{index}"


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise ValidationException(message)


def _check_keys(answers: dict, allowed: set[str], what: str) -> None:
    unknown = sorted(set(answers) - allowed)
    _expect(not unknown, f"Unknown {what}: {', '.join(unknown)}")


def validate_answers(task: Task, answers: dict[str, Any]) -> dict[str, Any]:
    """
    Check that answers fit the task variant.

    Returns:
        The answers, unchanged

    Raises:
        ValidationException: Unknown ids or wrong value types
    """
    if isinstance(task, MatchingTask):
        _check_keys(answers, {item.id for item in task.group1}, "group 1 items")
        targets = {item.id for item in task.group2}
        for value in answers.values():
            _expect(value is None or isinstance(value, str), "Matches must be group 2 item ids")
            _expect(not value or value in targets, f"Unknown group 2 item: {value}")

    elif isinstance(task, FillingBlanksTask):
        entries = {entry.id: entry for entry in task.blanks}
        _check_keys(answers, set(entries), "blank entries")
        for entry_id, blanks in answers.items():
            _expect(isinstance(blanks, dict), f"Answers for entry {entry_id} must be an object")
            entry = entries[entry_id]
            _check_keys(blanks, {blank_key(entry_id, i) for i in range(entry.num_blanks)}, "blanks")
            for value in blanks.values():
                _expect(isinstance(value, str), "Blank answers must be text")

    elif isinstance(task, MCQTask):
        questions = {question.id: question for question in task.questions}
        _check_keys(answers, set(questions), "questions")
        for question_id, selection in answers.items():
            _expect(isinstance(selection, list), f"Selection for question {question_id} must be a list")
            _expect(all(isinstance(option, str) for option in selection), "Options must be given by id")
            options = {option.id for option in questions[question_id].options}
            _expect(all(option in options for option in selection), f"Unknown option for question {question_id}")
            _expect(len(set(selection)) == len(selection), f"Duplicate option for question {question_id}")
            _expect(
                task.allow_multiple_selections or len(selection) <= 1,
                f"Only one option may be selected for question {question_id}",
            )

    elif isinstance(task, QATask):
        _check_keys(answers, {question.id for question in task.questions}, "questions")
        for value in answers.values():
            _expect(isinstance(value, str), "Answers must be text")

    elif isinstance(task, WritingTask):
        _check_keys(answers, {WRITING_AREA}, "fields")
        _expect(isinstance(answers.get(WRITING_AREA, ""), str), "Writing answer must be text")

    return answers


def task_status(task: Task, answers: dict[str, Any]) -> TaskStatus:
    """Whether the task counts as answered (and the word count for Writing)."""
    word_count = None
    required_words = None

    if isinstance(task, MatchingTask):
        answered = all(answers.get(item.id) for item in task.group1)
    elif isinstance(task, FillingBlanksTask):
        answered = all(
            str((answers.get(entry.id) or {}).get(blank_key(entry.id, i)) or "").strip()
            for entry in task.blanks
            for i in range(entry.num_blanks)
        )
    elif isinstance(task, MCQTask):
        answered = all(answers.get(question.id) for question in task.questions)
    elif isinstance(task, QATask):
        answered = all(count_words(answers.get(question.id)) >= 1 for question in task.questions)
    else:
        word_count = count_words(answers.get(WRITING_AREA))
        required_words = task.minimum_word_count
        answered = word_count >= required_words

    return TaskStatus(
        task_id=task.id,
        task_type=task.task_type,
        answered=answered,
        word_count=word_count,
        required_words=required_words,
    )


class WorkspaceService:
    """Service layer for the task workspace"""

    def __init__(self, db: Session):
        self.db = db
        self.exercise_repo = ExerciseRepository(db)
        self.answer_repo = AnswerRepository(db)

    def _get_exercise(self, exercise_id: int) -> Exercise:
        exercise = self.exercise_repo.get_by_id(exercise_id)
        if exercise is None:
            raise NotFoundException(f"Exercise {exercise_id} not found")
        return exercise

    def _statuses(self, exercise: Exercise, saved: dict[str, dict]) -> list[TaskStatus]:
        return [
            task_status(task_adapter.validate_python(row.to_payload()), saved.get(row.id, {}))
            for row in exercise.tasks
        ]

    def list_exercises(self, context: SessionContext) -> list[dict]:
        """All exercises with the principal's progress."""
        saved: dict[int, dict[str, dict]] = {}
        for answer in self.answer_repo.get_for_user(context.principal.id):
            saved.setdefault(answer.exercise_id, {})[answer.task_id] = answer.answers

        result = []
        for exercise in self.exercise_repo.get_all():
            statuses = self._statuses(exercise, saved.get(exercise.id, {}))
            result.append(
                {
                    "id": exercise.id,
                    "exercise_type": exercise.exercise_type,
                    "title": exercise.title,
                    "description": exercise.description,
                    "allowed_time": exercise.allowed_time,
                    "total_tasks": len(statuses),
                    "answered_tasks": sum(1 for status in statuses if status.answered),
                }
            )
        return result

    def get_exercise(self, exercise_id: int, context: SessionContext) -> dict:
        """Exercise, the principal's saved answers and per-task status."""
        exercise = self._get_exercise(exercise_id)
        saved = {
            answer.task_id: answer.answers
            for answer in self.answer_repo.get_for_exercise(context.principal.id, exercise_id)
        }
        return {
            "exercise": ExerciseResponse.model_validate(exercise),
            "answers": saved,
            "statuses": self._statuses(exercise, saved),
        }

    def save_answers(
        self, exercise_id: int, task_id: str, answers: dict[str, Any], context: SessionContext
    ) -> dict:
        """
        Validate and store the principal's answers for one task.

        Raises:
            NotFoundException: Unknown exercise or task
            ValidationException: Answers do not fit the task
        """
        exercise = self._get_exercise(exercise_id)
        row: ExerciseTask | None = next((row for row in exercise.tasks if row.id == task_id), None)
        if row is None:
            raise NotFoundException(f"Task {task_id} not found in exercise {exercise_id}")

        task = task_adapter.validate_python(row.to_payload())
        validate_answers(task, answers)

        stored = self.answer_repo.get(context.principal.id, task_id)
        if stored is None:
            stored = TaskAnswer(user_id=context.principal.id, exercise_id=exercise_id, task_id=task_id)
        stored.answers = dict(answers)
        stored = self.answer_repo.save(stored)

        logger.debug("Saved answers of user %s for task %s", context.principal.id, task_id)
        return {
            "task_id": task_id,
            "answers": stored.answers,
            "status": task_status(task, stored.answers),
        }
