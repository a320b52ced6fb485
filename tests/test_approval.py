from datetime import datetime, timezone

import pytest

from app.config.roles_config import ToolStatus
from app.modules.tools.approval import (
    INITIAL_STATUS, InvalidTransition, can_transition, moderation_patch,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_new_tools_start_pending():
    assert INITIAL_STATUS == ToolStatus.PENDING


def test_approve_sets_moderator_and_clears_reason():
    patch = moderation_patch(ToolStatus.PENDING, ToolStatus.APPROVED, "owner-1", reason="ignored", now=NOW)
    assert patch == {
        "status": "approved",
        "approved_by": "owner-1",
        "approved_at": NOW.isoformat(),
        "rejection_reason": None,
    }


def test_reject_keeps_trimmed_reason():
    patch = moderation_patch(ToolStatus.PENDING, ToolStatus.REJECTED, "owner-1", reason="  duplicate  ", now=NOW)
    assert patch["status"] == "rejected"
    assert patch["rejection_reason"] == "duplicate"
    assert patch["approved_by"] == "owner-1"


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_reject_without_reason_uses_default(reason):
    patch = moderation_patch(ToolStatus.PENDING, ToolStatus.REJECTED, "owner-1", reason=reason)
    assert patch["rejection_reason"] == "No reason given"


def test_decisions_can_be_revised_either_way():
    assert can_transition(ToolStatus.APPROVED, ToolStatus.REJECTED)
    assert can_transition(ToolStatus.REJECTED, ToolStatus.APPROVED)
    assert can_transition(ToolStatus.APPROVED, ToolStatus.APPROVED)


def test_nothing_returns_to_pending():
    for current in ToolStatus:
        assert not can_transition(current, ToolStatus.PENDING)
    with pytest.raises(InvalidTransition):
        moderation_patch(ToolStatus.APPROVED, ToolStatus.PENDING, "owner-1")


def test_accepts_raw_status_strings():
    patch = moderation_patch("approved", "rejected", "owner-2", reason="outdated")
    assert patch["status"] == "rejected"
    assert patch["approved_by"] == "owner-2"
