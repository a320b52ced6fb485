import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

from app.config import settings
from app.core.errors import forbidden, store_error
from app.core.policy import can_moderate
from app.modules.activity.schemas import (
    ActivityAction, ResourceType, ActivityLogResponse, ActivityLogUser
)

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Append-only audit writer. Best-effort: a failed write is logged and never raised."""

    def __init__(self, supabase: Client, user_agent: Optional[str] = None):
        self.supabase = supabase
        self.user_agent = user_agent

    def log(
        self,
        action: ActivityAction,
        resource_type: ResourceType,
        user_id: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_agent: Optional[str] = None,
    ) -> bool:
        activity_details = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "user_id": user_id,
            **(details or {}),
        }
        try:
            self.supabase.table("activity_logs").insert({
                "user_id": user_id,
                "action": ActivityAction(action).value,
                "resource_type": ResourceType(resource_type).value,
                "resource_id": resource_id,
                "details": activity_details,
                "user_agent": user_agent or self.user_agent,
            }).execute()
            logger.debug(f"Activity logged: {action} on {resource_type}")
            return True
        except Exception as e:
            logger.warning(f"Failed to log activity {action} on {resource_type}: {e}")
            return False


class ActivityService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_logs(
        self,
        actor,
        action: Optional[ActivityAction] = None,
        resource_type: Optional[ResourceType] = None,
        user_id: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ActivityLogResponse]:
        """Full audit trail, newest first. Moderators only."""
        if not can_moderate(actor):
            raise forbidden()
        try:
            query = self.supabase.table("activity_logs").select("*")
            if action:
                query = query.eq("action", ActivityAction(action).value)
            if resource_type:
                query = query.eq("resource_type", ResourceType(resource_type).value)
            if user_id:
                query = query.eq("user_id", user_id)
            result = query.order("created_at", desc=True).limit(limit or settings.activity_log_limit).execute()
            logs = self._attach_users(result.data or [])
        except Exception as e:
            raise store_error("Error fetching activity logs", e)
        if search:
            logs = [log for log in logs if _matches(log, search)]
        return logs

    def list_own_logs(self, actor, limit: Optional[int] = None) -> List[ActivityLogResponse]:
        try:
            result = self.supabase.table("activity_logs")\
                .select("*")\
                .eq("user_id", actor.id)\
                .order("created_at", desc=True)\
                .limit(limit or settings.activity_log_limit)\
                .execute()
            return self._attach_users(result.data or [])
        except Exception as e:
            raise store_error("Error fetching own activity logs", e)

    def _attach_users(self, rows: List[Dict[str, Any]]) -> List[ActivityLogResponse]:
        user_ids = list({r["user_id"] for r in rows if r.get("user_id")})
        users = {}
        if user_ids:
            profiles = self.supabase.table("profiles")\
                .select("id, full_name, email")\
                .in_("id", user_ids)\
                .execute()
            users = {p["id"]: ActivityLogUser(**p) for p in profiles.data or []}
        return [
            ActivityLogResponse(**{**r, "details": r.get("details") or {}, "user": users.get(r.get("user_id"))})
            for r in rows
        ]


def _matches(log: ActivityLogResponse, search: str) -> bool:
    term = search.lower()
    haystack = [log.action.value, json.dumps(log.details, default=str)]
    if log.user:
        haystack += [log.user.full_name or "", log.user.email or ""]
    return any(term in h.lower() for h in haystack)
