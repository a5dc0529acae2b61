"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from typing import Generator
from fastapi import Header
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from rigidity_gateway.api.main import create_app
from rigidity_gateway.api.dependencies import get_clock, get_current_user_id
from rigidity_gateway.infrastructure.database.models import Base
from rigidity_gateway.infrastructure.database.session import build_engine, get_db
from rigidity_gateway.domain.models import ExpenseAttributes, Profile


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


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


def _app_with_db(db: Session):
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    return app


@pytest.fixture
def client(db: Session) -> TestClient:
    """
    Authenticated test client.

    The caller is "user_test" unless the request sets X-Test-User, which lets
    a test act as a second user.
    """
    app = _app_with_db(db)

    def override_current_user(x_test_user: str = Header(default="user_test")) -> str:
        return x_test_user

    app.dependency_overrides[get_current_user_id] = override_current_user
    return TestClient(app)


@pytest.fixture
def anon_client(db: Session) -> TestClient:
    """Test client that goes through the real bearer-token dependency"""
    return TestClient(_app_with_db(db))


@pytest.fixture
def loan_payload() -> dict:
    """Car loan: legal link plus a year of contract left"""
    return {
        "name": "Car loan",
        "amount": 1000,
        "intention": "ESSENTIAL",
        "contract_months_remaining": 12,
        "cancellation_fee_pct": 20,
        "has_legal_link": True,
        "essential_obligation": False,
        "substitutability": 5,
        "notice_days": 0,
    }


@pytest.fixture
def streaming_payload() -> dict:
    """Streaming subscription: no contract, trivially replaceable"""
    return {
        "name": "Streaming",
        "amount": 45.9,
        "intention": "LEISURE",
        "substitutability": 10,
    }


@pytest.fixture
def loan_attrs() -> ExpenseAttributes:
    return ExpenseAttributes(
        name="Car loan",
        amount=1000,
        contract_months_remaining=12,
        cancellation_fee_pct=20,
        has_legal_link=True,
        substitutability=5,
    )


@pytest.fixture
def sample_profile() -> Profile:
    return Profile(
        income_floor=5000,
        income_is_variable=False,
        dependents=0,
        emergency_reserve=6000,
        debt_service=500,
    )
