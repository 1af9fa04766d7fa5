"""
Tests for startup, health check and database outage handling
"""
from fastapi.testclient import TestClient

from app.main import create_app
from conftest import make_settings


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_startup_reconciles_schema(app, client):
    assert app.state.schema_ready is True
    assert app.state.database.is_connected


def test_unknown_route_is_not_found(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "not_found"}


def test_non_integer_id_is_invalid_request(client):
    response = client.get("/api/clubs/abc")

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"


def test_server_starts_without_database(tmp_path):
    settings = make_settings(tmp_path, DATABASE_URL=f"sqlite:///{tmp_path / 'missing' / 'clubs.db'}")
    app = create_app(settings)

    with TestClient(app) as client:
        health = client.get("/healthz")
        clubs = client.get("/api/clubs")

    assert health.status_code == 200
    assert app.state.schema_ready is False
    assert clubs.status_code == 500
    assert clubs.json() == {"error": "db_error"}


def test_recovers_when_database_appears(tmp_path):
    missing = tmp_path / "later"
    settings = make_settings(tmp_path, DATABASE_URL=f"sqlite:///{missing / 'clubs.db'}")
    app = create_app(settings)

    with TestClient(app) as client:
        assert client.get("/api/clubs").status_code == 500

        missing.mkdir()
        response = client.get("/api/clubs")

    assert response.status_code == 200
    assert response.json() == {"clubs": []}
    assert app.state.schema_ready is True
