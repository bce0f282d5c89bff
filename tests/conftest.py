"""Pytest fixtures for testing"""

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finplanner.api.main import create_app
from finplanner.infrastructure.database.models import Base
from finplanner.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def headers() -> Dict[str, str]:
    """Identity header for the default test user"""
    return {"X-User-ID": "user_ana"}


@pytest.fixture
def other_headers() -> Dict[str, str]:
    return {"X-User-ID": "user_bruno"}


@pytest.fixture
def card(client: TestClient, headers: Dict[str, str]) -> dict:
    """Credit card closing on day 10"""
    response = client.post(
        "/v1/cards",
        json={"name": "Nubank", "brand": "Mastercard", "closing_day": 10, "limit": "5000.00"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()
