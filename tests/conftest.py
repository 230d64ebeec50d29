"""Test configuration and fixtures.

This module provides test configuration, database setup, fixtures,
and test data for the account server tests.
"""

import os
import uuid

# The application reads its settings at import time.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SALT_ROUNDS", "4")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import SQLModel, Session, create_engine
from sqlmodel.pool import StaticPool

from account_server.config import Settings
from account_server.database import get_session
from account_server.dependencies import get_hashing_service
from account_server.main import app
from account_server.models.thread import Thread, ThreadMessage
from account_server.models.user import User
from account_server.repositories.user_repository import UserRepository
from account_server.services.hashing_service import HashingService


# Test database configuration
TEST_DATABASE_URL = "sqlite:///:memory:"

# Lowest cost factor bcrypt accepts, keeps hashing fast in tests
TEST_SALT_ROUNDS = 4


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings with test database configuration."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        debug=True,
        log_level="DEBUG",
        environment="testing",
        salt_rounds=TEST_SALT_ROUNDS,
    )


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with in-memory SQLite and foreign keys enforced."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False  # Set to True for SQL debugging
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    SQLModel.metadata.create_all(engine)

    yield engine

    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_engine) -> Generator[Session, None, None]:
    """Create test database session."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(scope="session")
def hashing_service(test_settings: Settings) -> HashingService:
    """Create hashing service with the test cost factor."""
    return HashingService.from_settings(test_settings)


@pytest.fixture(scope="function")
def user_repository(
    test_session: Session, hashing_service: HashingService
) -> UserRepository:
    """Create UserRepository instance for testing."""
    return UserRepository(test_session, hashing_service)


@pytest.fixture(scope="function")
def client(test_session: Session, hashing_service: HashingService) -> TestClient:
    """Create test client with test database session."""
    app.dependency_overrides[get_session] = lambda: test_session
    app.dependency_overrides[get_hashing_service] = lambda: hashing_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def sample_user_data() -> dict[str, str]:
    """Raw credentials for a sample user."""
    return {"name": "alice", "email": "alice@example.com", "password": "correct horse"}


@pytest.fixture(scope="function")
def test_user(
    test_session: Session,
    hashing_service: HashingService,
    sample_user_data: dict[str, str],
) -> dict[str, str]:
    """Store a user with hashed credentials and return its ID and raw values."""
    user = User(
        name=sample_user_data["name"],
        email=hashing_service.hash(sample_user_data["email"]),
        password=hashing_service.hash(sample_user_data["password"]),
    )
    test_session.add(user)
    test_session.commit()
    test_session.refresh(user)
    return {"id": str(user.id), **sample_user_data}


@pytest.fixture(scope="function")
def other_user(test_session: Session, hashing_service: HashingService) -> dict[str, str]:
    """Store a second user."""
    raw = {"name": "bob", "email": "bob@example.com", "password": "hunter2"}
    user = User(
        name=raw["name"],
        email=hashing_service.hash(raw["email"]),
        password=hashing_service.hash(raw["password"]),
    )
    test_session.add(user)
    test_session.commit()
    test_session.refresh(user)
    return {"id": str(user.id), **raw}


@pytest.fixture(scope="function")
def test_thread(test_session: Session, test_user: dict[str, str]) -> Thread:
    """Create a thread with two messages owned by the test user."""
    user_id = uuid.UUID(test_user["id"])
    thread = Thread(user_id=user_id, title="First thread")
    test_session.add(thread)
    test_session.commit()
    test_session.refresh(thread)

    for content in ("hello", "world"):
        test_session.add(
            ThreadMessage(thread_id=thread.id, id_user=user_id, content=content)
        )
    test_session.commit()
    test_session.refresh(thread)
    return thread


@pytest.fixture(scope="function")
def executed_statements(test_engine) -> Generator[list[str], None, None]:
    """Record the SQL text of every statement sent to the test database."""
    statements: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(test_engine, "before_cursor_execute", record)
    yield statements
    event.remove(test_engine, "before_cursor_execute", record)


@pytest.fixture(scope="function")
def error_simulator():
    """Utility for simulating database failures."""
    class ErrorSimulator:
        @staticmethod
        def database_error():
            from sqlalchemy.exc import SQLAlchemyError
            return SQLAlchemyError("Simulated database error")

        @staticmethod
        def integrity_error():
            from sqlalchemy.exc import IntegrityError
            return IntegrityError("Simulated integrity error", None, Exception("UNIQUE"))

    return ErrorSimulator()


# Database state utilities
@pytest.fixture(scope="function")
def db_state_checker(test_session: Session):
    """Utility for checking database state in tests."""
    from sqlalchemy import func
    from sqlmodel import select

    class DatabaseStateChecker:
        def __init__(self, session: Session):
            self.session = session

        def count(self, model) -> int:
            return self.session.exec(select(func.count()).select_from(model)).one()

        def stored_user(self, name: str) -> User | None:
            return self.session.exec(select(User).where(User.name == name)).first()

    return DatabaseStateChecker(test_session)
