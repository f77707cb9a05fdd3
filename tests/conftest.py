"""Pytest configuration and shared fixtures.

Every test gets a fresh in-memory SQLite database. API tests talk to the
FastAPI app through ``TestClient`` with ``get_db`` pointed at that database.
"""

import os

# Settings are read when learnhub.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["BOOTSTRAP_DEFAULT_USERS"] = "false"
os.environ["DERIVE_COMPLETION_FROM_PROGRESS"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only"

import itertools
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models import FakeListChatModel
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from learnhub.app import app
from learnhub.core.database import get_db
from learnhub.core.dependencies import get_content_generator
from learnhub.generators.ContentGenerator import ContentGenerator
from learnhub.models.base import Base
from learnhub.utils.user_manager import UserManager

DEFAULT_PASSWORD = "password123"


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "api: mark test as an HTTP-level test")


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Provide an in-memory database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Provide a session for manager-level tests."""
    session = session_factory()
    yield session
    session.close()


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    """Provide a TestClient backed by the test database."""

    def override_get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(session_factory: sessionmaker) -> Callable[..., dict[str, Any]]:
    """Create users directly in the database.

    Returns a factory taking the role plus any ``create_user`` overrides and
    returning the user's id, username, email, password and role.
    """
    counter = itertools.count(1)

    def _create(role: str = "student", password: str = DEFAULT_PASSWORD, **overrides: Any) -> dict[str, Any]:
        n = next(counter)
        username = overrides.pop("username", f"{role}{n}")
        email = overrides.pop("email", f"{username}@example.com")
        with session_factory() as session:
            user = UserManager(session).create_user(
                username=username,
                email=email,
                password=password,
                first_name=overrides.pop("first_name", role.title()),
                last_name=overrides.pop("last_name", f"Number{n}"),
                role=role,
                **overrides,
            )
            return {
                "id": user.id,
                "username": username,
                "email": email,
                "password": password,
                "role": role,
            }

    return _create


@pytest.fixture
def login(client: TestClient) -> Callable[[dict[str, Any]], dict[str, str]]:
    """Log a user in and return bearer headers for them.

    The session cookie is dropped from the client so later requests are
    anonymous unless they pass the returned headers.
    """

    def _login(user: dict[str, Any]) -> dict[str, str]:
        response = client.post(
            "/api/login",
            json={"username": user["username"], "password": user["password"]},
        )
        assert response.status_code == 200, response.text
        client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def account(create_user, login) -> Callable[..., dict[str, Any]]:
    """Create a user of the given role and log them in (``headers`` key)."""

    def _account(role: str = "student", **overrides: Any) -> dict[str, Any]:
        user = create_user(role=role, **overrides)
        user["headers"] = login(user)
        return user

    return _account


@pytest.fixture
def create_course(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Create a course through the API as the given teacher or admin."""

    def _create(owner: dict[str, Any], status: str = "published", **fields: Any) -> dict[str, Any]:
        payload = {
            "title": "Intro to Python",
            "description": "Learn the basics.",
            "category": "Programming",
            "status": status,
        }
        payload.update(fields)
        response = client.post("/api/courses", json=payload, headers=owner["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def fake_llm_generator(client: TestClient) -> Callable[..., ContentGenerator]:
    """Install a ContentGenerator backed by canned chat model responses."""

    def _install(*responses: str) -> ContentGenerator:
        generator = ContentGenerator(llm=FakeListChatModel(responses=list(responses)))
        app.dependency_overrides[get_content_generator] = lambda: generator
        return generator

    return _install
