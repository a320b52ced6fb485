from supabase import Client
from app.config.roles_config import Role, ToolStatus
from app.core.cache import TTLCache
from app.core.errors import forbidden, not_found, store_error
from app.core.messages import msg
from app.core.policy import can_view, can_edit, can_delete, can_moderate, is_owner
from app.modules.activity.schemas import ActivityAction, ResourceType
from app.modules.activity.service import ActivityLogger
from app.modules.feedback.service import FeedbackService
from app.modules.tools.approval import INITIAL_STATUS, InvalidTransition, moderation_patch
from app.modules.tools.schemas import ToolCreate, ToolUpdate, ToolResponse
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class ToolService:
    def __init__(
        self,
        supabase: Client,
        cache: TTLCache,
        activity: Optional[ActivityLogger] = None,
        feedback: Optional[FeedbackService] = None,
    ):
        self.supabase = supabase
        self.cache = cache
        self.activity = activity
        self.feedback = feedback or FeedbackService(supabase)

    # Reads

    def list_tools(
        self,
        actor,
        category_id: Optional[str] = None,
        status_filter: Optional[ToolStatus] = None,
        role: Optional[Role] = None,
        search: Optional[str] = None,
        include_stats: bool = True,
        limit: int = 100,
        offset: int = 0,
    ) -> List[ToolResponse]:
        """Tools the actor may see: owners see all, others see approved tools plus their own.

        Role and category narrow the query itself. Free-text search also looks
        inside tags, so it is matched here and the page is cut afterwards.
        """
        try:
            query = self.supabase.table("ai_tools").select("*")
            if not is_owner(actor):
                query = query.or_(f"status.eq.{ToolStatus.APPROVED.value},created_by.eq.{actor.id}")
            if category_id:
                query = query.eq("category_id", category_id)
            if status_filter:
                query = query.eq("status", ToolStatus(status_filter).value)
            if role:
                tagged = self.supabase.table("tool_roles")\
                    .select("tool_id")\
                    .eq("role", Role(role).value)\
                    .execute()
                tagged_ids = list({r["tool_id"] for r in tagged.data or []})
                if not tagged_ids:
                    return []
                query = query.in_("id", tagged_ids)
            query = query.order("created_at", desc=True)
            if not search:
                query = query.limit(limit).offset(offset)
            rows = [r for r in query.execute().data or [] if can_view(r, actor)]
            roles_map = self._get_tool_roles([r["id"] for r in rows])
        except Exception as e:
            raise store_error("Error fetching tools", e)

        tools = [ToolResponse(**r, roles=roles_map.get(r["id"], [])) for r in rows]
        if search:
            tools = [t for t in tools if _matches(t, search)][offset:offset + limit]
        if include_stats and tools:
            stats = self.feedback.aggregate_many([t.id for t in tools])
            for t in tools:
                t.stats = stats.get(t.id)
        return tools

    def get_tool(self, tool_id: str, actor, include_stats: bool = True) -> ToolResponse:
        row = self._fetch_row(tool_id)
        if row is None or not can_view(row, actor):
            raise not_found("tool_not_found")
        tool = ToolResponse(**row, roles=self._get_tool_roles([tool_id]).get(tool_id, []))
        if include_stats:
            tool.stats = self.feedback.aggregate(tool_id)
        return tool

    def _fetch_row(self, tool_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("ai_tools")\
                .select("*")\
                .eq("id", tool_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise store_error("Error fetching tool", e)
        if result is None or not result.data:
            return None
        return result.data

    def _get_tool_roles(self, tool_ids: List[str]) -> Dict[str, List[Role]]:
        """Return map tool_id -> list of target roles."""
        if not tool_ids:
            return {}
        result = self.supabase.table("tool_roles").select("tool_id, role").in_("tool_id", tool_ids).execute()
        out: Dict[str, List[Role]] = {}
        for r in result.data or []:
            out.setdefault(r["tool_id"], []).append(Role(r["role"]))
        return out

    def _replace_roles(self, tool_id: str, roles: List[Role]) -> None:
        """Delete every role tag for the tool, then insert the new set."""
        self.supabase.table("tool_roles").delete().eq("tool_id", tool_id).execute()
        unique_roles = list(dict.fromkeys(Role(r).value for r in roles))
        if unique_roles:
            self.supabase.table("tool_roles").insert(
                [{"tool_id": tool_id, "role": r} for r in unique_roles]
            ).execute()

    # Mutations

    def submit(self, actor, data: ToolCreate) -> ToolResponse:
        """Create a tool owned by the actor, waiting for moderation"""
        payload = data.model_dump(mode="json", exclude={"roles"})
        payload.update({"status": INITIAL_STATUS.value, "created_by": actor.id})
        try:
            result = self.supabase.table("ai_tools").insert(payload).execute()
            if not result.data:
                raise RuntimeError("empty insert result")
        except Exception as e:
            raise store_error("Error creating tool", e)
        row = result.data[0]
        try:
            self._replace_roles(row["id"], data.roles)
        except Exception as e:
            self._discard_tool(row["id"])
            raise store_error("Error saving tool roles", e)

        self.cache.invalidate_all()
        self._log(ActivityAction.CREATE_TOOL, actor, row["id"], {
            "name": row["name"],
            "category": row.get("category_id"),
            "roles": [r.value for r in data.roles],
            "status": INITIAL_STATUS.value,
        })
        return self.get_tool(row["id"], actor)

    def edit(self, tool_id: str, actor, data: ToolUpdate) -> ToolResponse:
        """Update tool details and, when given, its role tags. Status is left as it is."""
        row = self._fetch_row(tool_id)
        if row is None or not can_view(row, actor):
            raise not_found("tool_not_found")
        if not can_edit(row, actor):
            raise forbidden()

        update_data = data.model_dump(mode="json", exclude_unset=True, exclude={"roles"})
        for key in ("name", "description", "difficulty_level", "pricing_model", "tags"):
            if update_data.get(key) is None:
                update_data.pop(key, None)
        try:
            if update_data:
                update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
                result = self.supabase.table("ai_tools")\
                    .update(update_data)\
                    .eq("id", tool_id)\
                    .execute()
                if not result.data:
                    raise not_found("tool_not_found")
            if data.roles is not None:
                self._replace_roles(tool_id, data.roles)
        except HTTPException:
            raise
        except Exception as e:
            raise store_error("Error updating tool", e)

        self.cache.invalidate_all()
        self._log(ActivityAction.UPDATE_TOOL, actor, tool_id, {
            "name": update_data.get("name", row["name"]),
            "category": update_data.get("category_id", row.get("category_id")),
            "roles": [r.value for r in data.roles] if data.roles is not None else None,
            "changes": sorted(k for k in update_data if k != "updated_at"),
        })
        return self.get_tool(tool_id, actor)

    def approve(self, tool_id: str, moderator) -> ToolResponse:
        return self._moderate(tool_id, moderator, ToolStatus.APPROVED)

    def reject(self, tool_id: str, moderator, reason: Optional[str] = None) -> ToolResponse:
        return self._moderate(tool_id, moderator, ToolStatus.REJECTED, reason)

    def _moderate(self, tool_id: str, moderator, target: ToolStatus, reason: Optional[str] = None) -> ToolResponse:
        if not can_moderate(moderator):
            raise forbidden()
        row = self._fetch_row(tool_id)
        if row is None:
            raise not_found("tool_not_found")
        action = ActivityAction.APPROVE_TOOL if target == ToolStatus.APPROVED else ActivityAction.REJECT_TOOL
        try:
            patch = moderation_patch(
                row.get("status") or INITIAL_STATUS, target, moderator.id,
                reason=reason, default_reason=msg("no_reason_given"),
            )
        except InvalidTransition:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=msg("invalid_transition"))

        try:
            result = self.supabase.table("ai_tools")\
                .update(patch)\
                .eq("id", tool_id)\
                .execute()
            if not result.data:
                raise not_found("tool_not_found")
        except HTTPException:
            raise
        except Exception as e:
            self._log(action, moderator, tool_id, {"tool_name": row["name"], "error": str(e), "success": False})
            raise store_error(f"Error during {action.value}", e)

        self.cache.invalidate_all()
        details = {"tool_name": row["name"], "previous_status": row.get("status")}
        if target == ToolStatus.APPROVED:
            details.update({"approved_by": moderator.id, "approved_at": patch["approved_at"]})
        else:
            details.update({
                "rejection_reason": patch["rejection_reason"],
                "rejected_by": moderator.id,
                "rejected_at": patch["approved_at"],
            })
        self._log(action, moderator, tool_id, details)
        return self.get_tool(tool_id, moderator)

    def delete(self, tool_id: str, actor) -> bool:
        """Delete a tool with its role tags, ratings and comments"""
        row = self._fetch_row(tool_id)
        if row is None or not can_view(row, actor):
            raise not_found("tool_not_found")
        if not can_delete(row, actor):
            raise forbidden()
        tool_name = row["name"]
        try:
            for child in ("tool_roles", "tool_ratings", "tool_comments"):
                self.supabase.table(child).delete().eq("tool_id", tool_id).execute()
            self.supabase.table("ai_tools").delete().eq("id", tool_id).execute()
        except Exception as e:
            self._log(ActivityAction.DELETE_TOOL, actor, tool_id, {"tool_name": tool_name, "error": str(e), "success": False})
            raise store_error("Error deleting tool", e)

        self.cache.invalidate_all()
        self._log(ActivityAction.DELETE_TOOL, actor, tool_id, {
            "tool_name": tool_name,
            "deleted_by": actor.id,
            "deleted_at": datetime.now(timezone.utc).isoformat(),
        })
        return True

    def _discard_tool(self, tool_id: str) -> None:
        """Remove a tool whose creation failed part-way."""
        try:
            self.supabase.table("ai_tools").delete().eq("id", tool_id).execute()
        except Exception as e:
            logger.error(f"Could not remove partially created tool {tool_id}: {e}")

    def _log(self, action: ActivityAction, actor, tool_id: str, details: dict) -> None:
        if self.activity:
            self.activity.log(action, ResourceType.AI_TOOL, user_id=actor.id, resource_id=tool_id, details=details)


def _matches(tool: ToolResponse, search: str) -> bool:
    term = search.lower()
    return (
        term in tool.name.lower()
        or term in tool.description.lower()
        or any(term in tag.lower() for tag in tool.tags)
    )
