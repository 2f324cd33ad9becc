"""
Pytest configuration and fixtures for Second Brain tests.
"""

import pytest
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi import FastAPI
from fastapi.testclient import TestClient

from second_brain.core.config import Settings
from second_brain.core.database import Base, get_db
from second_brain.main import create_app
from second_brain.models.user import User

TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PASSWORD = "Str0ng!Pass"
API = "/api/v1"


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        SECRET_KEY="test_secret_key_for_testing_only",
        DATABASE_URL=TEST_DATABASE_URL,
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def test_app(test_settings, db_session) -> FastAPI:
    """Application wired to the test session; lifespan is not run."""
    app = create_app(test_settings)

    def override_get_db():
        try:
            yield db_session
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture(scope="function")
def client(test_app) -> TestClient:
    """Create a test client without entering context manager."""
    return TestClient(test_app, raise_server_exceptions=False)


@pytest.fixture(scope="function")
def token_service(test_app):
    return test_app.state.token_service


@pytest.fixture(scope="function")
def password_hasher(test_app):
    return test_app.state.password_hasher


def _make_user(db_session, password_hasher, username: str) -> User:
    user = User(username=username, password=password_hasher.hash(TEST_PASSWORD))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db_session, password_hasher) -> User:
    return _make_user(db_session, password_hasher, "alice")


@pytest.fixture(scope="function")
def other_user(db_session, password_hasher) -> User:
    return _make_user(db_session, password_hasher, "bob")


@pytest.fixture(scope="function")
def auth_headers(token_service, test_user) -> dict:
    """Bare token in the Authorization header, as clients send it."""
    return {"Authorization": token_service.issue(test_user.id)}


@pytest.fixture(scope="function")
def other_auth_headers(token_service, other_user) -> dict:
    return {"Authorization": token_service.issue(other_user.id)}


@pytest.fixture
def add_content(client):
    """Post content through the API and return the created record."""

    def _add(headers, title="t", tags=None, link="http://x", type="twitter"):
        response = client.post(
            f"{API}/content",
            json={"link": link, "type": type, "title": title, "tags": tags or []},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["content"]

    return _add
