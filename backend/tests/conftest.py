# backend/tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database per test, a session bound to
it, and a FastAPI TestClient whose get_db dependency points at the same
database.
"""

from __future__ import annotations

import os

# Must be set before enrollment.main is imported: it creates tables on import.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from enrollment import models  # noqa: F401
from enrollment.database import build_engine, create_tables, get_db


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    from enrollment.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_candidate():
    """Build a valid student candidate; keyword arguments override fields."""
    def _make(**overrides):
        candidate = {
            "name": "John Doe",
            "email": "john@example.com",
            "phone_number": "123456789012",
            "type": "STUDENT",
            "amount_paid": 5000,
            "due_amount": 2000,
            "discount": 500,
            "incentives_paid": 0,
            "date_of_joining": "2024-01-15",
            "country": "India",
            "state": "Maharashtra",
            "address": "123 Main St",
            "government_id_proof": "AADHAR123",
            "activity_status": "ACTIVE",
            "inactivity_reason": None,
            "inactive_on": None,
        }
        candidate.update(overrides)
        return candidate
    return _make
