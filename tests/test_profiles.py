def test_my_profile(client, headers, users):
    me = client.get("/api/v1/profiles/me", headers=headers["qa"]).json()
    assert me["id"] == users["qa"]
    assert me["role"] == "qa"


def test_list_profiles_sorted_by_name(client, headers, users):
    names = [p["full_name"] for p in client.get("/api/v1/profiles", headers=headers["qa"]).json()]
    assert names == sorted(names)
    assert len(names) == len(users)


def test_toggle_two_factor_is_logged(client, headers, db):
    resp = client.put("/api/v1/profiles/me/two-factor", json={"enabled": True}, headers=headers["backend"])
    assert resp.status_code == 200
    assert resp.json()["two_factor_enabled"] is True

    log = db.rows("activity_logs")[-1]
    assert log["action"] == "enable_2fa"
    assert log["resource_type"] == "profile"

    client.put("/api/v1/profiles/me/two-factor", json={"enabled": False}, headers=headers["backend"])
    assert db.rows("activity_logs")[-1]["action"] == "disable_2fa"


def test_enabling_two_factor_changes_next_login(client, headers):
    client.put("/api/v1/profiles/me/two-factor", json={"enabled": True}, headers=headers["backend"])
    resp = client.post("/api/v1/auth/login", json={"email": "petar@backend.local", "password": "password"})
    assert resp.json()["status"] == "awaiting_code"


def test_profile_updates(client, headers, users):
    resp = client.put(f"/api/v1/profiles/{users['qa']}", json={"full_name": "G. Nikolov"}, headers=headers["qa"])
    assert resp.status_code == 200
    assert resp.json()["full_name"] == "G. Nikolov"

    assert client.put(f"/api/v1/profiles/{users['qa']}", json={"full_name": "X"}, headers=headers["pm"]).status_code == 403
    assert client.put(f"/api/v1/profiles/{users['qa']}", json={"role": "owner"}, headers=headers["qa"]).status_code == 403

    resp = client.put(f"/api/v1/profiles/{users['qa']}", json={"role": "pm"}, headers=headers["owner"])
    assert resp.json()["role"] == "pm"


def test_unknown_profile(client, headers):
    assert client.get("/api/v1/profiles/nobody", headers=headers["qa"]).status_code == 404
