from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_generator.app.core.config import Settings, get_settings
from portfolio_generator.app.core.sessions import (
    InMemorySessionStore,
    get_session_store,
)
from portfolio_generator.app.database import database
from portfolio_generator.app.database.database import configure_engine, get_db
from portfolio_generator.app.main import create_app
from portfolio_generator.app.models import Base

TEST_EMAIL = "user@example.com"
TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def mock_database_imports(monkeypatch):
    """Auto-used fixture to prevent connections to the configured database."""
    monkeypatch.setattr(database, "_engine", None)
    monkeypatch.setattr(database, "_SessionLocal", None)
    with (
        patch("portfolio_generator.app.database.database.create_engine"),
        patch("portfolio_generator.app.database.database.sessionmaker"),
    ):
        yield


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Fixture providing settings that ignore any local .env file."""
    return Settings(_env_file=None, UPLOAD_DIR=str(tmp_path / "uploads"))


@pytest.fixture
def db_engine():
    """Fixture providing an in-memory SQLite engine with the schema created."""
    engine = configure_engine(
        create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        ),
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """Fixture providing a real database session against the in-memory engine."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore(lifetime=timedelta(hours=24))


@pytest.fixture
def app(settings, session_factory, session_store) -> FastAPI:
    """Fixture to create a new app for each test, wired to the in-memory database."""
    get_settings.cache_clear()
    _app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    _app.dependency_overrides[get_db] = override_get_db
    _app.dependency_overrides[get_settings] = lambda: settings
    _app.dependency_overrides[get_session_store] = lambda: session_store
    yield _app
    # Clear dependency overrides after test
    _app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Fixture to create a test client for each test."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    """Fixture providing a client that has registered and holds a session cookie."""
    response = client.post(
        "/api/register",
        json={"email": TEST_EMAIL, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    return client
