from app.modules.feedback.service import FeedbackService
from tests.conftest import submit_tool


def tool_ids(resp):
    assert resp.status_code == 200, resp.text
    return [t["id"] for t in resp.json()]


def test_submitted_tool_is_pending_and_hidden_from_other_roles(client, headers, users):
    tool = submit_tool(client, headers["backend"], roles=["backend", "qa"], tags=[" ai ", "ai", "code"])
    assert tool["status"] == "pending"
    assert tool["created_by"] == users["backend"]
    assert sorted(tool["roles"]) == ["backend", "qa"]
    assert tool["tags"] == ["ai", "code"]
    assert tool["stats"] == {"tool_id": tool["id"], "average_rating": 0.0, "total_ratings": 0, "total_comments": 0}

    assert tool["id"] not in tool_ids(client.get("/api/v1/tools", headers=headers["qa"]))
    assert client.get(f"/api/v1/tools/{tool['id']}", headers=headers["qa"]).status_code == 404

    assert tool["id"] in tool_ids(client.get("/api/v1/tools", headers=headers["backend"]))
    assert tool["id"] in tool_ids(client.get("/api/v1/tools", headers=headers["owner"]))


def test_approved_tool_becomes_visible_to_everyone(client, headers):
    tool = submit_tool(client, headers["backend"])
    resp = client.post(f"/api/v1/tools/{tool['id']}/approve", headers=headers["owner"])
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"

    for name in ("qa", "designer", "pm"):
        assert tool["id"] in tool_ids(client.get("/api/v1/tools", headers=headers[name]))


def test_only_owners_moderate(client, headers):
    tool = submit_tool(client, headers["backend"])
    resp = client.post(f"/api/v1/tools/{tool['id']}/approve", headers=headers["backend"])
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied"
    resp = client.post(f"/api/v1/tools/{tool['id']}/reject", headers=headers["qa"])
    assert resp.status_code == 403


def test_latest_moderation_decision_wins(client, headers, users, db):
    tool = submit_tool(client, headers["backend"])
    client.post(f"/api/v1/tools/{tool['id']}/approve", headers=headers["owner"])
    resp = client.post(f"/api/v1/tools/{tool['id']}/reject", headers=headers["owner2"])

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "rejected"
    assert body["approved_by"] == users["owner2"]
    assert body["rejection_reason"] == "No reason given"

    actions = [log["action"] for log in db.rows("activity_logs")]
    assert actions.count("approve_tool") == 1
    assert actions.count("reject_tool") == 1


def test_reject_with_reason_then_reapprove_clears_it(client, headers):
    tool = submit_tool(client, headers["backend"])
    resp = client.post(f"/api/v1/tools/{tool['id']}/reject", json={"reason": " duplicate "}, headers=headers["owner"])
    assert resp.json()["rejection_reason"] == "duplicate"

    # rejected tools stay visible to their creator
    assert client.get(f"/api/v1/tools/{tool['id']}", headers=headers["backend"]).status_code == 200

    resp = client.post(f"/api/v1/tools/{tool['id']}/approve", headers=headers["owner"])
    assert resp.json()["status"] == "approved"
    assert resp.json()["rejection_reason"] is None


def test_moderating_unknown_tool_is_404(client, headers):
    assert client.post("/api/v1/tools/missing/approve", headers=headers["owner"]).status_code == 404


def test_edit_is_creator_or_owner_and_keeps_status(client, headers):
    tool = submit_tool(client, headers["backend"], roles=["backend", "frontend"])
    client.post(f"/api/v1/tools/{tool['id']}/approve", headers=headers["owner"])

    resp = client.put(f"/api/v1/tools/{tool['id']}", json={"name": "Hijacked"}, headers=headers["qa"])
    assert resp.status_code == 403

    resp = client.put(
        f"/api/v1/tools/{tool['id']}",
        json={"name": "Copilot X", "roles": []},
        headers=headers["backend"],
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Copilot X"
    assert body["description"] == tool["description"]
    assert body["status"] == "approved"
    assert body["roles"] == []

    resp = client.put(f"/api/v1/tools/{tool['id']}", json={"pricing_model": "paid"}, headers=headers["owner"])
    assert resp.json()["pricing_model"] == "paid"


def test_roles_untouched_when_not_sent(client, headers):
    tool = submit_tool(client, headers["backend"], roles=["backend"])
    resp = client.put(f"/api/v1/tools/{tool['id']}", json={"description": "Updated"}, headers=headers["backend"])
    assert resp.json()["roles"] == ["backend"]


def test_delete_removes_tool_and_its_feedback(client, headers, db):
    tool = submit_tool(client, headers["backend"])
    client.post(f"/api/v1/tools/{tool['id']}/approve", headers=headers["owner"])
    client.put(f"/api/v1/tools/{tool['id']}/rating", json={"rating": 4}, headers=headers["qa"])
    client.post(f"/api/v1/tools/{tool['id']}/comments", json={"content": "Nice"}, headers=headers["qa"])

    assert client.delete(f"/api/v1/tools/{tool['id']}", headers=headers["qa"]).status_code == 403
    assert client.delete(f"/api/v1/tools/{tool['id']}", headers=headers["backend"]).status_code == 204

    assert client.get(f"/api/v1/tools/{tool['id']}", headers=headers["owner"]).status_code == 404
    assert client.get(f"/api/v1/tools/{tool['id']}/stats", headers=headers["owner"]).status_code == 404
    stats = FeedbackService(db).aggregate(tool["id"])
    assert (stats.total_ratings, stats.total_comments, stats.average_rating) == (0, 0, 0.0)
    assert db.rows("tool_roles") == []
    assert db.rows("tool_ratings") == []
    assert db.rows("tool_comments") == []

    log = db.rows("activity_logs")[-1]
    assert log["action"] == "delete_tool"
    assert log["details"]["tool_name"] == tool["name"]


def test_list_filters(client, headers):
    first = submit_tool(client, headers["backend"], name="Copilot", roles=["backend"], tags=["code"])
    second = submit_tool(client, headers["backend"], name="Figma AI", roles=["designer"], tags=["design"])
    third = submit_tool(client, headers["backend"], name="Tester", roles=["qa"])
    client.post(f"/api/v1/tools/{first['id']}/approve", headers=headers["owner"])
    client.post(f"/api/v1/tools/{second['id']}/approve", headers=headers["owner"])

    assert tool_ids(client.get("/api/v1/tools?role=designer", headers=headers["qa"])) == [second["id"]]
    assert tool_ids(client.get("/api/v1/tools?search=CODE", headers=headers["qa"])) == [first["id"]]
    assert tool_ids(client.get("/api/v1/tools?status=pending", headers=headers["owner"])) == [third["id"]]
    assert tool_ids(client.get("/api/v1/tools?status=pending", headers=headers["qa"])) == []


def test_list_is_newest_first(client, headers):
    first = submit_tool(client, headers["backend"], name="One")
    second = submit_tool(client, headers["backend"], name="Two")
    assert tool_ids(client.get("/api/v1/tools", headers=headers["backend"])) == [second["id"], first["id"]]


def test_submit_validation(client, headers):
    resp = client.post("/api/v1/tools", json={"name": "", "description": "x"}, headers=headers["backend"])
    assert resp.status_code == 422
    resp = client.post(
        "/api/v1/tools",
        json={"name": "X", "description": "x", "roles": ["janitor"]},
        headers=headers["backend"],
    )
    assert resp.status_code == 422


def test_store_failure_is_a_short_502(client, headers, db):
    db.failing_tables.add("ai_tools")
    resp = client.get("/api/v1/tools", headers=headers["backend"])
    assert resp.status_code == 502
    assert "ai_tools" not in resp.json()["detail"]


def test_requires_authentication(client):
    assert client.get("/api/v1/tools").status_code in (401, 403)
    assert client.get("/api/v1/tools", headers={"Authorization": "Bearer bogus"}).status_code == 401


def test_filters_apply_before_paging(client, headers):
    alpha = submit_tool(client, headers["backend"], name="Alpha", roles=["designer"])
    beta = submit_tool(client, headers["backend"], name="Beta", roles=["backend"])
    gamma = submit_tool(client, headers["backend"], name="Gamma", roles=["backend"])
    for tool in (alpha, beta, gamma):
        client.post(f"/api/v1/tools/{tool['id']}/approve", headers=headers["owner"])

    assert tool_ids(client.get("/api/v1/tools?search=alpha&limit=1", headers=headers["qa"])) == [alpha["id"]]
    assert tool_ids(client.get("/api/v1/tools?role=designer&limit=1", headers=headers["qa"])) == [alpha["id"]]
    assert tool_ids(client.get("/api/v1/tools?role=backend&limit=1&offset=1", headers=headers["qa"])) == [beta["id"]]
    assert tool_ids(client.get("/api/v1/tools?search=helps&limit=2&offset=1", headers=headers["qa"])) == [beta["id"], alpha["id"]]
    assert tool_ids(client.get("/api/v1/tools?role=pm", headers=headers["qa"])) == []


def test_failed_role_tagging_leaves_no_tool_behind(client, headers, db):
    db.failing_tables.add("tool_roles")
    resp = client.post(
        "/api/v1/tools",
        json={"name": "Orphan", "description": "half written", "roles": ["qa"]},
        headers=headers["backend"],
    )
    assert resp.status_code == 502
    assert db.rows("ai_tools") == []
    assert "create_tool" not in [log["action"] for log in db.rows("activity_logs")]
