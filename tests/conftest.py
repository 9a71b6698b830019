from pathlib import Path
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from jaothui.adapters.sqlite.migrator import SQLiteMigrator
from jaothui.adapters.sqlite.repos import SQLiteFarmRepo, SQLiteProfileRepo
from jaothui.api.deps import Settings, get_rate_limiter, get_settings
from jaothui.api.main import app
from jaothui.app_shell.rate_limit import RateLimiter
from jaothui.domain.entities import Farm
from jaothui.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PASSWORD = "Buffalo#2024"
CRON_SECRET = "test-cron-secret"


@pytest.fixture
def rules():
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def db_path(tmp_path):
    """A migrated database in a temporary directory."""
    path = str(tmp_path / "jaothui.db")
    SQLiteMigrator(path, str(PROJECT_ROOT / "migrations")).run_migrations()
    return path


@pytest.fixture
def settings(tmp_path, db_path):
    s = Settings()
    s.data_dir = tmp_path
    s.db_path = db_path
    s.uploads_dir = tmp_path / "uploads"
    s.migrations_dir = str(PROJECT_ROOT / "migrations")
    s.rules_path = PROJECT_ROOT / "rules.yaml"
    s.cron_secret = CRON_SECRET
    return s


@pytest.fixture
def limiter(rules):
    return RateLimiter(rules.rate_limit)


@pytest.fixture
def client(settings, limiter):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(client):
    """Register a profile and log in; the client keeps the access cookie."""

    def _login(phone_number: str) -> dict:
        resp = client.post(
            "/api/auth/register", json={"phone_number": phone_number, "password": PASSWORD}
        )
        assert resp.status_code == 201, resp.text
        resp = client.post(
            "/api/auth/login", json={"phone_number": phone_number, "password": PASSWORD}
        )
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _login


@pytest.fixture
def farmer(login_as, db_path):
    """A logged-in owner with one farm; returns (profile_id, farm_id)."""
    login = login_as("0812345678")
    profile_id = UUID(login["profile"]["id"])
    assert SQLiteProfileRepo(db_path).get_by_id(profile_id) is not None

    farm = SQLiteFarmRepo(db_path).save(Farm(name="ฟาร์มควายไทย", owner_id=profile_id))
    return profile_id, farm.id
