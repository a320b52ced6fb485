from app.scripts.seed_users import SEED_USERS, seed_users
from tests.fakes import FakeSupabase


def test_seed_creates_one_account_per_role():
    db = FakeSupabase()
    assert seed_users(db) == len(SEED_USERS)

    profiles = db.rows("profiles")
    assert sorted(p["role"] for p in profiles) == sorted(["owner", "frontend", "backend", "pm", "qa", "designer"])
    two_factor = [p["email"] for p in profiles if p["two_factor_enabled"]]
    assert two_factor == ["elena@frontend.local"]
    assert db.auth.users["ivan@admin.local"]["password"] == "password"


def test_seed_is_idempotent():
    db = FakeSupabase()
    seed_users(db)
    ids = {p["email"]: p["id"] for p in db.rows("profiles")}

    seed_users(db)
    assert len(db.auth.users) == len(SEED_USERS)
    assert {p["email"]: p["id"] for p in db.rows("profiles")} == ids
