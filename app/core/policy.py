"""
Role / visibility policy.
Pure predicates over an actor (a profile with ``id`` and ``role``) and a resource.
They never raise: a missing actor or resource is simply denied, and callers
decide whether that means an empty result, a 404 or a 403.
"""
from typing import Any, Optional

from app.config.roles_config import Role, ToolStatus


def _field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _value(v: Any) -> Any:
    return v.value if hasattr(v, "value") else v


def is_owner(actor: Any) -> bool:
    return _value(_field(actor, "role")) == Role.OWNER.value


def _is_self(actor: Any, user_id: Optional[str]) -> bool:
    actor_id = _field(actor, "id")
    return actor_id is not None and user_id is not None and str(actor_id) == str(user_id)


def can_view(tool: Any, actor: Any) -> bool:
    if tool is None or actor is None:
        return False
    return (
        _value(_field(tool, "status")) == ToolStatus.APPROVED.value
        or _is_self(actor, _field(tool, "created_by"))
        or is_owner(actor)
    )


def can_edit(tool: Any, actor: Any) -> bool:
    if tool is None or actor is None:
        return False
    return _is_self(actor, _field(tool, "created_by")) or is_owner(actor)


def can_delete(tool: Any, actor: Any) -> bool:
    return can_edit(tool, actor)


def can_edit_comment(comment: Any, actor: Any) -> bool:
    """Author or owner. Governs comment deletion (owner moderation)."""
    if comment is None or actor is None:
        return False
    return _is_self(actor, _field(comment, "user_id")) or is_owner(actor)


def can_update_comment(comment: Any, actor: Any) -> bool:
    """Only the author rewrites a comment's content."""
    if comment is None or actor is None:
        return False
    return _is_self(actor, _field(comment, "user_id"))


def can_moderate(actor: Any) -> bool:
    """Approve/reject tools, read the full activity log, open the admin panel."""
    return actor is not None and is_owner(actor)


def can_delete_category(actor: Any) -> bool:
    return can_moderate(actor)


def can_edit_profile(profile_id: str, actor: Any) -> bool:
    return actor is not None and (_is_self(actor, profile_id) or is_owner(actor))


def can_change_role(actor: Any) -> bool:
    return can_moderate(actor)


def can_toggle_two_factor(profile_id: str, actor: Any) -> bool:
    return actor is not None and _is_self(actor, profile_id)
