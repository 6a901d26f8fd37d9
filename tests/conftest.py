"""Shared fixtures: an in-memory database per test and an authenticated API client."""

import os
import sys
from datetime import date, time

# Must be set before booking_admin.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booking_admin.database import Base, get_db
from booking_admin.models import Appointment, Client, Role, Service, Staff
from booking_admin.middleware.auth import hash_password
from booking_admin.seed import ensure_admin

ADMIN_PASSWORD = "admin123"


@pytest.fixture
def engine():
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
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def amy(db) -> Client:
    client = Client(
        first_name="Amy",
        last_name="Lee",
        email="amy.lee@example.com",
        phone_number="555-0100",
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


@pytest.fixture
def haircut(db) -> Service:
    service = Service(
        name="Haircut",
        duration_minutes=30,
        price=50.0,
        description="Wash, cut and style",
        category="Hair",
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def stylist(db) -> Staff:
    role = Role(role_name="Stylist")
    db.add(role)
    db.flush()
    staff = Staff(
        first_name="John",
        last_name="Smith",
        email="john.smith@example.com",
        username="john",
        hashed_password=hash_password("password123"),
        role_id=role.role_id,
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


@pytest.fixture
def appointment_data(amy, haircut) -> dict:
    return {
        "client_id": amy.client_id,
        "service_id": haircut.service_id,
        "appointment_date": date(2026, 11, 2),
        "start_time": time(10, 0),
        "end_time": time(10, 30),
        "notes": "First visit",
    }


@pytest.fixture
def raw_appointment(db, appointment_data) -> Appointment:
    """An appointment inserted directly, with no audit or snapshot rows."""
    appointment = Appointment(**appointment_data, status="pending")
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


@pytest.fixture
def api(session_factory):
    from booking_admin.main import app

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
def admin(db) -> Staff:
    return ensure_admin(
        db,
        email="jane.doe@example.com",
        username="jane",
        password=ADMIN_PASSWORD,
        first_name="Jane",
        last_name="Doe",
    )


@pytest.fixture
def auth_headers(api, admin) -> dict:
    resp = api.post("/api/auth/login", json={"identifier": "jane", "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
