"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
"""
import os
import uuid
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_tracegreen.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from tracegreen.db.base import Base, get_db
from tracegreen.main import app
from tracegreen.models.badge import Badge

SQLITE_URL = "sqlite:///./test_tracegreen.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# (name, criteria_type, criteria_value, rarity)
_DEFAULT_BADGES = [
    ("First Step",      "activities_logged", "1",    "common"),
    ("Carbon Counter",  "carbon_logged",     "100",  "common"),
    ("Week Warrior",    "streak_days",       "7",    "rare"),
    ("Point Collector", "points_earned",     "1000", "rare"),
]


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    # Seed default badges (normally done by Alembic migration)
    db = TestingSessionLocal()
    try:
        for name, criteria_type, value, rarity in _DEFAULT_BADGES:
            db.add(Badge(
                name=name,
                description=f"{name} badge",
                criteria_type=criteria_type,
                criteria_value=Decimal(value),
                rarity=rarity,
                is_active=True,
            ))
        db.commit()
    finally:
        db.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}@example.com"


@pytest.fixture()
def unique_email():
    """Callable returning an email no other test has used."""
    return _unique_email


@pytest.fixture()
def profile(client):
    """A freshly created profile (JSON body)."""
    r = client.post("/profiles", json={"email": _unique_email(), "full_name": "Test User"})
    assert r.status_code == 201
    return r.json()
