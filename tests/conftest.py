"""Shared fixtures: an app on a throwaway SQLite file and helpers to seed it."""

import pytest
from fastapi.testclient import TestClient

from applytrack.config import config_from_dict
from applytrack.models import Job, User
from applytrack.web.app import create_app

PASSWORD = "Secret123"


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("SESSION_SECRET", raising=False)
    cfg = config_from_dict({})
    cfg.server.database_url = f"sqlite:///{tmp_path / 'test.db'}"
    cfg.server.session_secret = "test-secret"
    cfg.log_dir = str(tmp_path / "logs")
    return cfg


@pytest.fixture
def app(config):
    application = create_app(config)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_job(app):
    """Insert a job directly and return its id."""

    def _make_job(**kwargs) -> int:
        defaults = dict(
            title="Software Engineer",
            company="Acme Inc",
            description="Build things.",
            apply_url="https://example.com/apply",
            skills_required=[],
        )
        defaults.update(kwargs)
        with app.state.session_factory() as db:
            job = Job(**defaults)
            db.add(job)
            db.commit()
            return job.id

    return _make_job


@pytest.fixture
def register(client):
    """Register (and sign in) a user through the API."""

    def _register(email="jane@example.com", password=PASSWORD, first_name="Jane", last_name="Doe"):
        resp = client.post("/api/auth/register", json={
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
        })
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]["user"]

    return _register


@pytest.fixture
def make_admin(app):
    def _make_admin(user_id: int, role: str = "ADMIN"):
        with app.state.session_factory() as db:
            user = db.get(User, user_id)
            user.role = role
            db.commit()

    return _make_admin
