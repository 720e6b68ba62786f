"""Pytest configuration shared across backend tests."""

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Deterministic settings during import-time initialisation, regardless of shell env.
os.environ["SUPABASE_URL"] = "http://supabase.test"
os.environ["SUPABASE_KEY"] = "anon-test-key"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""
os.environ["PAYMENT_PUBLIC_KEY"] = "pk_test_123"
os.environ["RATE_LIMIT"] = "10000/minute"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.dependencies import get_current_user_id  # noqa: E402
from app.database.supabase_client import get_service_supabase, get_supabase  # noqa: E402
from app.modules.auth.service import clear_auth_cache  # noqa: E402
from fakes import ADMIN_ID, USER_ID, FakeSupabase, profile_row  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def fake_db():
    return FakeSupabase(tables={
        "profiles": [
            profile_row(),
            profile_row(ADMIN_ID, "grace", is_admin=True),
        ],
    })


def _client_for(fake_db, user_id):
    from app.main import app

    def _current_user():
        return {
            "id": user_id,
            "email": f"{user_id}@example.com",
            "username": next(
                (p["username"] for p in fake_db.tables.get("profiles", []) if p["id"] == user_id),
                "User",
            ),
            "user_metadata": {},
            "app_metadata": {},
        }

    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_service_supabase] = lambda: None
    app.dependency_overrides[get_current_user_id] = _current_user
    return app


@pytest.fixture
def client(fake_db):
    app = _client_for(fake_db, USER_ID)
    with TestClient(app) as test_client:
        test_client.headers["Authorization"] = "Bearer test-token"
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(fake_db):
    app = _client_for(fake_db, ADMIN_ID)
    with TestClient(app) as test_client:
        test_client.headers["Authorization"] = "Bearer admin-token"
        yield test_client
    app.dependency_overrides.clear()
