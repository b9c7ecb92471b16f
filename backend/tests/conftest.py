# backend/tests/conftest.py
"""
Pytest configuration.

Tests run against an in-memory SQLite database; tables are created before
and dropped after every test. Bearer tokens are minted locally with the
same secret and audience the API verifies.
"""

import os
import sys

# Must be set before any skilloop import so Settings picks them up
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IS_TESTING"] = "true"
os.environ["PAYPAL_CLIENT_ID"] = "test-client-id"
os.environ["PAYPAL_CLIENT_SECRET"] = "test-client-secret"

backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, backend_dir)

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session

from skilloop.api.dependencies import get_db
from skilloop.auth import create_access_token
from skilloop.database import Base, SessionLocal, engine
from skilloop.main import app
from skilloop.models.booking import Booking
from skilloop.models.content import ServiceCategory
from skilloop.models.profile import Profile
from skilloop.models.trainer import Trainer


@pytest.fixture(scope="function")
def db():
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session):
    """Test client sharing the test session with the app."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


def auth_headers_for(profile: Profile) -> Dict[str, str]:
    token = create_access_token(data={"sub": profile.id, "email": profile.email})
    return {"Authorization": f"Bearer {token}"}


def _make_profile(db: Session, email: str, role: str = "client", full_name: str = "Test User") -> Profile:
    profile = Profile(email=email, full_name=full_name, role=role)
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def test_client_profile(db: Session) -> Profile:
    return _make_profile(db, "client@example.com", full_name="Priya Client", role="client")


@pytest.fixture
def test_admin(db: Session) -> Profile:
    return _make_profile(db, "admin@example.com", full_name="Ada Admin", role="admin")


@pytest.fixture
def test_trainer(db: Session) -> Trainer:
    """Approved trainer charging 1000/hour."""
    profile = _make_profile(db, "trainer@example.com", full_name="Tariq Trainer", role="trainer")
    trainer = Trainer(
        user_id=profile.id,
        name="Tariq Trainer",
        title="Cloud Architect",
        bio="Fifteen years of building and teaching cloud platforms for large teams.",
        specialization="Cloud Computing",
        skills=["AWS", "Kubernetes"],
        hourly_rate=Decimal("1000"),
        experience_years=15,
        location="Bengaluru",
        timezone="Asia/Kolkata",
        status="approved",
    )
    db.add(trainer)
    db.commit()
    return trainer


@pytest.fixture
def make_profile(db: Session) -> Callable[..., Profile]:
    def _make(email: str, role: str = "client", full_name: str = "Test User") -> Profile:
        return _make_profile(db, email, role=role, full_name=full_name)

    return _make


@pytest.fixture
def headers_for() -> Callable[[Profile], Dict[str, str]]:
    return auth_headers_for


@pytest.fixture
def client_headers(test_client_profile: Profile) -> Dict[str, str]:
    return auth_headers_for(test_client_profile)


@pytest.fixture
def trainer_headers(test_trainer: Trainer) -> Dict[str, str]:
    return auth_headers_for(test_trainer.profile)


@pytest.fixture
def admin_headers(test_admin: Profile) -> Dict[str, str]:
    return auth_headers_for(test_admin)


@pytest.fixture
def future_window() -> Callable[..., tuple]:
    """Factory for (start, end) windows a number of days ahead at a given hour."""

    def _window(days: int = 3, hour: int = 10, hours: int = 2):
        start = (datetime.now(timezone.utc) + timedelta(days=days)).replace(
            hour=hour, minute=0, second=0, microsecond=0
        )
        return start, start + timedelta(hours=hours)

    return _window


@pytest.fixture
def make_booking(db: Session, test_client_profile: Profile, test_trainer: Trainer, future_window):
    """Insert a booking directly, bypassing the service rules."""

    def _make(status: str = "pending", days: int = 3, hour: int = 10, hours: int = 2, **overrides) -> Booking:
        start, end = future_window(days=days, hour=hour, hours=hours)
        fields = dict(
            student_id=test_client_profile.id,
            trainer_id=test_trainer.id,
            training_topic="Kubernetes Fundamentals",
            start_time=start,
            end_time=end,
            duration_hours=Decimal(hours),
            status=status,
            booking_type="direct",
            total_amount=Decimal(1000 * hours),
            client_payment_amount=Decimal(1000 * hours),
            payment_status="pending",
        )
        fields.update(overrides)
        booking = Booking(**fields)
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def test_category(db: Session) -> ServiceCategory:
    category = ServiceCategory(
        slug="leadership",
        name="Leadership Training",
        description="Leadership programmes for managers",
        base_price=Decimal("5000"),
        is_active=True,
        display_order=1,
    )
    db.add(category)
    db.commit()
    return category
