from tests.conftest import submit_tool


def test_stats_counts(client, headers, users):
    submit_tool(client, headers["backend"])
    client.post("/api/v1/categories", json={"name": "Coding"}, headers=headers["qa"])

    stats = client.get("/api/v1/dashboard/stats", headers=headers["pm"]).json()
    assert stats == {"tools": 1, "categories": 1, "users": len(users)}


def test_stats_are_cached_until_a_write(client, headers, users, db):
    before = client.get("/api/v1/dashboard/stats", headers=headers["pm"]).json()
    db.add_profile("new@qa.local", "qa")
    assert client.get("/api/v1/dashboard/stats", headers=headers["pm"]).json() == before

    submit_tool(client, headers["backend"])
    after = client.get("/api/v1/dashboard/stats", headers=headers["pm"]).json()
    assert after["tools"] == 1
    assert after["users"] == len(users) + 1


def test_role_directory(client):
    roles = client.get("/api/v1/dashboard/roles").json()
    assert [r["role"] for r in roles] == ["owner", "backend", "frontend", "pm", "qa", "designer"]
    assert all(r["display_name"] and r["icon"] and r["color"] for r in roles)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    resp = client.get("/ready")
    assert resp.status_code == 200
    assert resp.headers["X-Frame-Options"] == "DENY"
