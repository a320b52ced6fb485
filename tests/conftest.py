import os
os.environ.setdefault("LOCALE", "en")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.cache import TTLCache
from app.database.supabase_client import get_supabase, get_auth_client
from app.modules.auth.two_factor import TwoFactorChallengeStore
from tests.fakes import FakeSupabase, RecordingCodeSender


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def code_sender():
    return RecordingCodeSender()


@pytest.fixture
def client(db, code_sender):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_auth_client] = lambda: db
    app.state.cache = TTLCache()
    app.state.auth_cache = TTLCache()
    app.state.challenges = TwoFactorChallengeStore(code_ttl_minutes=10)
    app.state.code_sender = code_sender
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def users(db):
    """One profile per role plus a second owner, keyed by a short name."""
    return {
        "owner": db.add_profile("ivan@admin.local", "owner", "Ivan Ivanov"),
        "owner2": db.add_profile("boss@admin.local", "owner", "Second Owner"),
        "frontend": db.add_profile("elena@frontend.local", "frontend", "Elena Petrova", two_factor_enabled=True),
        "backend": db.add_profile("petar@backend.local", "backend", "Petar Georgiev"),
        "pm": db.add_profile("maria@pm.local", "pm", "Maria Stoyanova"),
        "qa": db.add_profile("georgi@qa.local", "qa", "Georgi Nikolov"),
        "designer": db.add_profile("ana@design.local", "designer", "Ana Dimitrova"),
    }


def auth_headers(db, user_id):
    return {"Authorization": f"Bearer {db.auth.issue_token(user_id)}"}


@pytest.fixture
def headers(db, users):
    """Bearer headers per user name, e.g. headers["backend"]"""
    return {name: auth_headers(db, uid) for name, uid in users.items()}


def submit_tool(client, headers, name="Copilot", roles=("backend",), **extra):
    body = {"name": name, "description": f"{name} helps", "roles": list(roles), **extra}
    resp = client.post("/api/v1/tools", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
