"""
Approval lifecycle of a submitted tool.

pending is the only initial state. A moderator moves a tool to approved or
rejected and may re-decide later in either direction; the latest decision
wins and records the latest moderator. Nothing returns a tool to pending.
"""
from datetime import datetime, timezone
from typing import Dict, Optional

from app.config.roles_config import ToolStatus

INITIAL_STATUS = ToolStatus.PENDING

MODERATION_TRANSITIONS = {
    ToolStatus.PENDING: {ToolStatus.APPROVED, ToolStatus.REJECTED},
    ToolStatus.APPROVED: {ToolStatus.APPROVED, ToolStatus.REJECTED},
    ToolStatus.REJECTED: {ToolStatus.APPROVED, ToolStatus.REJECTED},
}


class InvalidTransition(Exception):
    def __init__(self, current: ToolStatus, target: ToolStatus):
        super().__init__(f"Cannot move tool from {current.value} to {target.value}")
        self.current = current
        self.target = target


def can_transition(current: ToolStatus, target: ToolStatus) -> bool:
    return ToolStatus(target) in MODERATION_TRANSITIONS.get(ToolStatus(current), set())


def moderation_patch(
    current: ToolStatus,
    target: ToolStatus,
    moderator_id: str,
    reason: Optional[str] = None,
    default_reason: str = "No reason given",
    now: Optional[datetime] = None,
) -> Dict[str, Optional[str]]:
    """Row update for a moderation decision. approved_by/approved_at are set on every decision."""
    current, target = ToolStatus(current), ToolStatus(target)
    if not can_transition(current, target):
        raise InvalidTransition(current, target)
    decided_at = (now or datetime.now(timezone.utc)).isoformat()
    if target == ToolStatus.APPROVED:
        rejection_reason = None
    else:
        rejection_reason = reason.strip() if reason and reason.strip() else default_reason
    return {
        "status": target.value,
        "approved_by": moderator_id,
        "approved_at": decided_at,
        "rejection_reason": rejection_reason,
    }
