"""Pytest configuration and shared fixtures."""

import os
from datetime import date, timedelta
from decimal import Decimal

# Cheap hashing and quiet logs; must be set before the app reads its settings
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SQLITE_BUSY_TIMEOUT", "15")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.auth.roles import UserRole  # noqa: E402
from src.auth.schemas import UserCreate  # noqa: E402
from src.auth.service import UserService  # noqa: E402
from src.database import create_db_engine, get_db, init_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models import Event  # noqa: E402

DEFAULT_PASSWORD = "Test123456"


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'tigertix_test.sqlite'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_event(session_factory):
    """Insert an event in its own short-lived session and return its id"""

    def _make_event(total_tickets=100, available_tickets=None, price=Decimal("10.00"), name="Tiger Jazz Night", days_ahead=10):
        session = session_factory()
        try:
            event = Event(
                name=name,
                date=date.today() + timedelta(days=days_ahead),
                description="",
                location="Brooks Center",
                category="Music",
                total_tickets=total_tickets,
                available_tickets=total_tickets if available_tickets is None else available_tickets,
                price=price,
            )
            session.add(event)
            session.commit()
            return event.id
        finally:
            session.close()

    return _make_event


@pytest.fixture
def read_event(session_factory):
    """Fresh read of an event row"""

    def _read_event(event_id):
        session = session_factory()
        try:
            return session.get(Event, event_id)
        finally:
            session.close()

    return _read_event


@pytest.fixture
def make_user(session_factory):
    """Create a user in its own session and return (id, email)"""

    def _make_user(email="student@clemson.edu", password=DEFAULT_PASSWORD, role=UserRole.USER):
        session = session_factory()
        try:
            user = UserService.create_user(
                session,
                UserCreate(email=email, password=password, first_name="Test", last_name="User", role=role),
            )
            return user.id, user.email
        finally:
            session.close()

    return _make_user


@pytest.fixture
def auth_headers(client, make_user):
    """Log a user in through the API and return its bearer header"""

    def _auth_headers(email="student@clemson.edu", role=UserRole.USER):
        make_user(email=email, role=role)
        response = client.post("/api/auth/login", json={"email": email, "password": DEFAULT_PASSWORD})
        assert response.status_code == 200
        token = response.json()["tokens"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
