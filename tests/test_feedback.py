import pytest
from fastapi import HTTPException

from app.modules.feedback.service import aggregate_ratings, validate_comment, validate_rating
from tests.conftest import submit_tool


@pytest.fixture
def approved_tool(client, headers):
    tool = submit_tool(client, headers["backend"])
    client.post(f"/api/v1/tools/{tool['id']}/approve", headers=headers["owner"])
    return tool


def test_aggregate_ratings():
    stats = aggregate_ratings("t1", [4, 5], comment_count=3)
    assert stats.average_rating == 4.5
    assert stats.total_ratings == 2
    assert stats.total_comments == 3

    empty = aggregate_ratings("t1", [], comment_count=0)
    assert empty.average_rating == 0.0
    assert empty.total_ratings == 0


@pytest.mark.parametrize("value", [0, 6, 4.5, True, "5", None])
def test_validate_rating_rejects_out_of_range_and_non_integers(value):
    with pytest.raises(HTTPException) as exc:
        validate_rating(value)
    assert exc.value.status_code == 400


def test_validate_comment():
    assert validate_comment("  looks good ") == "looks good"
    with pytest.raises(HTTPException):
        validate_comment("   ")


def test_rerating_replaces_previous_value(client, headers, approved_tool):
    url = f"/api/v1/tools/{approved_tool['id']}"
    assert client.put(f"{url}/rating", json={"rating": 3}, headers=headers["qa"]).status_code == 200
    assert client.put(f"{url}/rating", json={"rating": 5}, headers=headers["qa"]).status_code == 200

    stats = client.get(f"{url}/stats", headers=headers["qa"]).json()
    assert stats["average_rating"] == 5.0
    assert stats["total_ratings"] == 1

    mine = client.get(f"{url}/rating", headers=headers["qa"]).json()
    assert mine["rating"] == 5


def test_average_over_several_users(client, headers, approved_tool):
    url = f"/api/v1/tools/{approved_tool['id']}"
    client.put(f"{url}/rating", json={"rating": 4}, headers=headers["qa"])
    client.put(f"{url}/rating", json={"rating": 5}, headers=headers["pm"])

    tool = client.get(url, headers=headers["designer"]).json()
    assert tool["stats"]["average_rating"] == 4.5
    assert tool["stats"]["total_ratings"] == 2


def test_remove_rating(client, headers, approved_tool):
    url = f"/api/v1/tools/{approved_tool['id']}"
    client.put(f"{url}/rating", json={"rating": 2}, headers=headers["qa"])
    assert client.delete(f"{url}/rating", headers=headers["qa"]).status_code == 204
    assert client.get(f"{url}/rating", headers=headers["qa"]).json() is None
    assert client.get(f"{url}/stats", headers=headers["qa"]).json()["total_ratings"] == 0


@pytest.mark.parametrize("rating", [0, 6, 4.5, "five", True])
def test_invalid_ratings_are_refused(client, headers, approved_tool, rating):
    resp = client.put(f"/api/v1/tools/{approved_tool['id']}/rating", json={"rating": rating}, headers=headers["qa"])
    assert resp.status_code == 422


def test_cannot_rate_or_comment_on_hidden_tool(client, headers):
    tool = submit_tool(client, headers["backend"])
    url = f"/api/v1/tools/{tool['id']}"
    assert client.put(f"{url}/rating", json={"rating": 4}, headers=headers["qa"]).status_code == 404
    assert client.post(f"{url}/comments", json={"content": "hi"}, headers=headers["qa"]).status_code == 404
    # the creator can already give feedback on a pending tool
    assert client.put(f"{url}/rating", json={"rating": 4}, headers=headers["backend"]).status_code == 200


def test_stats_of_hidden_tool_are_not_disclosed(client, headers):
    tool = submit_tool(client, headers["backend"], name="Secret")
    url = f"/api/v1/tools/{tool['id']}"
    client.put(f"{url}/rating", json={"rating": 4}, headers=headers["backend"])

    assert client.get(url, headers=headers["qa"]).status_code == 404
    assert client.get(f"{url}/stats", headers=headers["qa"]).status_code == 404

    own = client.get(f"{url}/stats", headers=headers["backend"]).json()
    assert own["average_rating"] == 4.0
    assert client.get(f"{url}/stats", headers=headers["owner"]).status_code == 200


def test_comments_are_trimmed_and_carry_author(client, headers, users, approved_tool):
    url = f"/api/v1/tools/{approved_tool['id']}/comments"
    resp = client.post(url, json={"content": "  Great for reviews  "}, headers=headers["qa"])
    assert resp.status_code == 201
    assert resp.json()["content"] == "Great for reviews"

    client.post(url, json={"content": "Agreed"}, headers=headers["pm"])
    comments = client.get(url, headers=headers["designer"]).json()
    assert [c["content"] for c in comments] == ["Agreed", "Great for reviews"]
    assert comments[1]["user"]["full_name"] == "Georgi Nikolov"
    assert client.get(f"/api/v1/tools/{approved_tool['id']}/stats", headers=headers["qa"]).json()["total_comments"] == 2


def test_blank_comment_is_refused(client, headers, approved_tool):
    resp = client.post(
        f"/api/v1/tools/{approved_tool['id']}/comments", json={"content": "   "}, headers=headers["qa"]
    )
    assert resp.status_code == 422


def test_comment_edit_is_author_only_and_delete_allows_owner(client, headers, approved_tool):
    url = f"/api/v1/tools/{approved_tool['id']}/comments"
    comment = client.post(url, json={"content": "first"}, headers=headers["qa"]).json()

    assert client.put(f"/api/v1/comments/{comment['id']}", json={"content": "x"}, headers=headers["owner"]).status_code == 403
    resp = client.put(f"/api/v1/comments/{comment['id']}", json={"content": " edited "}, headers=headers["qa"])
    assert resp.status_code == 200
    assert resp.json()["content"] == "edited"

    assert client.delete(f"/api/v1/comments/{comment['id']}", headers=headers["pm"]).status_code == 403
    assert client.delete(f"/api/v1/comments/{comment['id']}", headers=headers["owner"]).status_code == 204
    assert client.get(url, headers=headers["qa"]).json() == []
    assert client.delete(f"/api/v1/comments/{comment['id']}", headers=headers["qa"]).status_code == 404
