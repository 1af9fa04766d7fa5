"""
Pytest configuration and fixtures.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from app.config import Settings
from app.main import create_app

ADMIN_CODE = "letmein"
PRESIDENT_PASSWORD = "pres-pass"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'clubs.db'}",
        "ADMIN_CODE": ADMIN_CODE,
        "PRESIDENT_PASSWORD": PRESIDENT_PASSWORD,
        "RATE_LIMIT_MAX_ATTEMPTS": 3,
        "TRUST_PROXY": False,
        "LOG_LEVEL": "DEBUG",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client with startup (schema reconciliation + connect) already run."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def engine(tmp_path):
    """Bare SQLite engine for schema reconciliation tests."""
    engine = create_engine(f"sqlite:///{tmp_path / 'schema.db'}")
    yield engine
    engine.dispose()


def submission(**overrides) -> dict:
    payload = {
        "president_submit_password": PRESIDENT_PASSWORD,
        "club_name": "Chess Club",
        "meeting_frequency": "weekly",
        "meeting_time_type": "lunch",
        "meeting_days": ["Monday"],
        "meeting_room": "B12",
        "fields": ["STEM"],
        "description": "short",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def submit(client):
    def _submit(**overrides):
        return client.post("/api/presidents/submit", json=submission(**overrides))
    return _submit


@pytest.fixture
def admin_headers():
    return {"X-Admin-Code": ADMIN_CODE}
