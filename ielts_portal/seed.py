"""
Start-up seed data.

Creates the configured SuperAdmin when no SuperAdmin exists yet, and a
sample exercise per module when there are no exercises at all. Both
steps are idempotent.
"""

import logging
import secrets
from sqlalchemy.orm import Session

from ielts_portal.config import settings
from ielts_portal.core.roles import Role
from ielts_portal.core.security import hash_password
from ielts_portal.models.exercise import Exercise, ExerciseTask
from ielts_portal.models.managed_account import ManagedAccount
from ielts_portal.repositories.exercise_repository import ExerciseRepository
from ielts_portal.repositories.user_repository import UserRepository
from ielts_portal.schemas.exercise_schemas import ExerciseCreate
from ielts_portal.services.exercise_service import apply_details, fill_task_row

logger = logging.getLogger(__name__)

SAMPLE_EXERCISES: list[dict] = [
    {
        "exercise_type": "Reading",
        "title": "Academic Reading: The History of the Compass",
        "description": "Read the passage below and answer the two tasks that follow.",
        "allowed_time": 20,
        "passage": (
            "Paragraph A: The earliest compasses were developed in China during the Han Dynasty "
            "and were used for geomancy, not navigation.\n\n"
            "Paragraph B: By the 11th century the compass was adapted for maritime use, with a "
            "magnetized needle floating in a bowl of water.\n\n"
            "Paragraph C: The technology spread to Europe during the 12th century, where a dry "
            "pivot made it stable on rough seas."
        ),
        "image_url": "https://picsum.photos/800/400?random=1",
        "tasks": [
            {
                "task_type": "Matching",
                "title": "Task 1: Match Headings to Paragraphs",
                "description": "Match the following headings to the correct paragraphs (A-C).",
                "allowed_time": 5,
                "group1": [{"id": "h1", "value": "A"}, {"id": "h2", "value": "B"}, {"id": "h3", "value": "C"}],
                "group2": [
                    {"id": "i1", "value": "The Role in Global Exploration"},
                    {"id": "i2", "value": "Early Non-Navigational Use"},
                    {"id": "i3", "value": "Maritime Adaptation and Accuracy"},
                ],
            },
            {
                "task_type": "MCQ",
                "title": "Task 2: Multiple Choice Question",
                "description": "Choose the correct letter, A, B, C or D.",
                "allowed_time": 5,
                "allow_multiple_selections": False,
                "questions": [
                    {
                        "question_text": "What was the primary use of the earliest compass in China?",
                        "options": [
                            {"id": "o1", "value": "Navigating ships across oceans"},
                            {"id": "o2", "value": "Determining favorable locations"},
                            {"id": "o3", "value": "Measuring time during long voyages"},
                            {"id": "o4", "value": "Mapping coastlines"},
                        ],
                    }
                ],
            },
        ],
    },
    {
        "exercise_type": "Writing",
        "title": "Academic Writing Task 1: Bar Chart Analysis",
        "description": (
            "Summarise the employment status of graduates from one UK university in 2024 "
            "by reporting the main features."
        ),
        "allowed_time": 20,
        "passage": "Write a report of at least 150 words.",
        "tasks": [
            {
                "task_type": "Writing",
                "title": "Analyze and Report",
                "description": "Write a report describing the main features of the bar chart.",
                "allowed_time": 20,
                "minimum_word_count": 150,
            }
        ],
    },
    {
        "exercise_type": "Listening",
        "title": "Listening Section 1: Hotel Reservation",
        "description": "Complete the form using NO MORE THAN TWO WORDS and/or a NUMBER for each answer.",
        "allowed_time": 10,
        "recording_url": "http://example.com/audio/hotel_booking.mp3",
        "tasks": [
            {
                "task_type": "Filling Blanks",
                "title": "Hotel Booking Form Completion",
                "description": "Complete the sentences below.",
                "allowed_time": 10,
                "max_words_per_blank": 2,
                "blanks": [
                    {"text_before": "Customer Name: (Mr.) Jeremy"},
                    {"text_before": "Arrival Date:"},
                    {"text_before": "Room Type: Double with a"},
                    {"text_before": "Confirmation Code:"},
                ],
            }
        ],
    },
    {
        "exercise_type": "Speaking",
        "title": "Speaking Part 2: Long Turn (Describe a City)",
        "description": "Talk about the topic for one to two minutes.",
        "allowed_time": 5,
        "tasks": [
            {
                "task_type": "QA",
                "title": "Cue Card Questions",
                "description": "Describe a city or a town you have enjoyed visiting.",
                "allowed_time": 5,
                "max_words_per_answer": 200,
                "questions": [
                    {"value": "Where is the city or town?"},
                    {"value": "What did you do there?"},
                    {"value": "Explain why you enjoyed visiting it."},
                ],
            }
        ],
    },
]


def seed_super_admin(db: Session) -> ManagedAccount | None:
    """Create the configured SuperAdmin unless one already exists."""
    user_repo = UserRepository(db)
    if not settings.SEED_SUPERADMIN_EMAIL or not settings.SEED_SUPERADMIN_PASSWORD:
        logger.info("No SuperAdmin credentials configured, skipping account seed")
        return None
    if user_repo.count_super_admins() > 0 or user_repo.get_by_email(settings.SEED_SUPERADMIN_EMAIL):
        return None

    account = ManagedAccount(
        first_name="Super",
        last_name="Admin",
        email=settings.SEED_SUPERADMIN_EMAIL,
        password_hash=hash_password(settings.SEED_SUPERADMIN_PASSWORD),
        role=Role.SUPER_ADMIN.value,
        referral_code=secrets.token_hex(4).upper(),
    )
    account = user_repo.create(account)
    logger.info("Seeded SuperAdmin account %s", account.email)
    return account


def seed_exercises(db: Session) -> list[Exercise]:
    """Add one sample exercise per module when the catalogue is empty."""
    exercise_repo = ExerciseRepository(db)
    if exercise_repo.count() > 0:
        return []

    created = []
    for sample in SAMPLE_EXERCISES:
        data = ExerciseCreate.model_validate(sample)
        exercise = Exercise(exercise_type=data.exercise_type)
        apply_details(exercise, data)
        exercise.tasks = [
            fill_task_row(ExerciseTask(id=task.id), task, position) for position, task in enumerate(data.tasks)
        ]
        created.append(exercise_repo.create(exercise))

    logger.info("Seeded %d sample exercises", len(created))
    return created


def seed_database(db: Session) -> None:
    seed_super_admin(db)
    seed_exercises(db)
