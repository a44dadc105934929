import os

# Settings are read at import time; tests never need a real database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-do-not-use-in-production")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from ielts_portal.database import get_db
from ielts_portal.config import settings
from ielts_portal.core.roles import Role
from ielts_portal.core.security import hash_password
# Import all model classes to ensure they're registered with SQLAlchemy
from ielts_portal.models.registry import Base, ManagedAccount
# Import FastAPI app AFTER model imports
from ielts_portal.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_account(
    db,
    role: str,
    email: str,
    first_name: str = "Test",
    last_name: str | None = None,
    password: str = DEFAULT_PASSWORD,
    is_active: bool = True,
) -> ManagedAccount:
    """
    Insert an account straight into the database.

    role is stored as given, so invalid roles can be planted too.
    """
    account = ManagedAccount(
        first_name=first_name,
        last_name=last_name or role,
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
        referral_code=email.split("@")[0].upper()[:32],
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Log in through the API and return Authorization headers"""
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def create_test_token(
    user_id: int = 1, session_id: str = "0" * 32, expired: bool = False, key: str | None = None
) -> str:
    """
    Generate a JWT for testing without going through login.

    Args:
        user_id: User ID to embed in 'sub' claim
        session_id: Session ID to embed in 'sid' claim
        expired: If True, create expired token
        key: Signing key (defaults to SECRET_KEY)

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": str(user_id), "sid": session_id, "exp": exp, "iat": datetime.now(UTC)}
    return jwt.encode(payload, key or settings.SECRET_KEY, algorithm="HS256")


@pytest.fixture
def super_admin(db_session):
    return make_account(db_session, Role.SUPER_ADMIN.value, "root@example.com", first_name="Super")


@pytest.fixture
def admin(db_session):
    return make_account(db_session, Role.ADMIN.value, "admin@example.com", first_name="Ada")


@pytest.fixture
def editor(db_session):
    return make_account(db_session, Role.EDITOR.value, "editor@example.com", first_name="Eddie")


@pytest.fixture
def other_editor(db_session):
    return make_account(db_session, Role.EDITOR.value, "editor2@example.com", first_name="Erin")


@pytest.fixture
def plain_user(db_session):
    return make_account(db_session, Role.USER.value, "user@example.com", first_name="Uma")


@pytest.fixture
def super_admin_headers(client, super_admin):
    return login(client, super_admin.email)


@pytest.fixture
def admin_headers(client, admin):
    return login(client, admin.email)


@pytest.fixture
def editor_headers(client, editor):
    return login(client, editor.email)


@pytest.fixture
def user_headers(client, plain_user):
    return login(client, plain_user.email)


def reading_exercise_payload(**overrides) -> dict:
    """Reading exercise with a Matching and an MCQ task"""
    payload = {
        "exercise_type": "Reading",
        "title": "The History of the Compass",
        "description": "Read the passage and answer the tasks.",
        "allowed_time": 20,
        "passage": "Paragraph A ... Paragraph B ...",
        "image_url": "https://example.com/compass.png",
        "recording_url": "https://example.com/not-for-reading.mp3",
        "tasks": [
            {
                "id": "task-matching",
                "task_type": "Matching",
                "title": "Match Headings",
                "group1": [{"id": "h1", "value": "A"}, {"id": "h2", "value": "B"}],
                "group2": [{"id": "i1", "value": "Early use"}, {"id": "i2", "value": "Maritime use"}],
            },
            {
                "id": "task-mcq",
                "task_type": "MCQ",
                "title": "Multiple Choice",
                "questions": [
                    {
                        "id": "q1",
                        "question_text": "What was the earliest compass used for?",
                        "options": [{"id": "o1", "value": "Navigation"}, {"id": "o2", "value": "Geomancy"}],
                    }
                ],
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def reading_exercise(client, editor_headers):
    """Reading exercise created through the API by the editor"""
    response = client.post("/api/exercises", headers=editor_headers, json=reading_exercise_payload())
    assert response.status_code == 201, response.text
    return response.json()
