import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Deterministic settings for tests (read when medicare.core.config is imported)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALG"] = "HS256"
os.environ["REPORT_TIMEZONE"] = "UTC"

from medicare.api.deps import get_db
from medicare.core.config import settings
from medicare.db.base import Base
from medicare.main import app

GENERATED_AT = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def db_session():
    """A fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False,
                                  autoflush=False,
                                  bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    """Synchronous TestClient bound to the per-test database."""

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_token(role: str, sub: str = None, **claims) -> str:
    payload = {"sub": sub or f"{role}-1", "role": role, **claims}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def auth(role: str, **kwargs) -> dict:
    return {"Authorization": f"Bearer {make_token(role, **kwargs)}"}


@pytest.fixture
def admin_headers():
    return auth("admin", email="admin@medicare.health")


@pytest.fixture
def doctor_headers():
    return auth("doctor", sub="doc-1", email="house@medicare.health")


@pytest.fixture
def pharmacist_headers():
    return auth("pharmacist", sub="pharm-1")


@pytest.fixture
def patient_dict():
    return {
        "firstName": "Jane",
        "lastName": "Doe",
        "dateOfBirth": "1990-05-12",
        "gender": "female",
        "email": "jane.doe@example.com",
        "phone": "555-0100",
        "bloodType": "O+",
        "allergies": [],
        "medicalHistory": [],
        "currentMedications": [],
        "status": "active",
        "createdBy": "doc-1",
    }


@pytest.fixture
def prescription_dict():
    return {
        "patientId": "p-1",
        "patientName": "Jane Doe",
        "medication": "Amoxicillin",
        "dosage": "500mg",
        "frequency": "3x daily",
        "duration": "7 days",
        "instructions": "Take with food",
        "prescribedBy": "doc-1",
        "prescribedByName": "Dr. House",
        "status": "active",
    }


@pytest.fixture
def treatment_dict():
    return {
        "patientId": "p-1",
        "patientName": "Jane Doe",
        "treatmentType": "Physiotherapy",
        "description": "Lower back rehabilitation",
        "priority": "high",
        "status": "scheduled",
        "scheduledDate": "2024-03-20T14:05:09Z",
        "createdBy": "nurse-1",
        "createdByName": "Nurse Joy",
    }
