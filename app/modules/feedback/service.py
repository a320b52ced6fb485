import math
from supabase import Client
from app.modules.feedback.schemas import (
    RatingResponse, CommentResponse, CommentAuthor, ToolStats
)
from app.core.errors import bad_request, forbidden, not_found, store_error
from app.core.policy import can_view, can_edit_comment, can_update_comment
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


def validate_rating(value) -> int:
    """Ratings are integers 1-5; bools and floats are rejected."""
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise bad_request("rating_range")
    return value


def validate_comment(content: str) -> str:
    if not isinstance(content, str) or not content.strip():
        raise bad_request("comment_empty")
    return content.strip()


def aggregate_ratings(tool_id: str, ratings: Iterable[int], comment_count: int) -> ToolStats:
    """Mean of ratings (0.0 when there are none) plus counts."""
    values = list(ratings)
    average = math.fsum(values) / len(values) if values else 0.0
    return ToolStats(
        tool_id=tool_id,
        average_rating=average,
        total_ratings=len(values),
        total_comments=comment_count,
    )


class FeedbackService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _visible_tool(self, tool_id: str, actor) -> dict:
        try:
            result = self.supabase.table("ai_tools")\
                .select("id, status, created_by")\
                .eq("id", tool_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise store_error("Error fetching tool", e)
        tool = result.data if result is not None else None
        if not tool or not can_view(tool, actor):
            raise not_found("tool_not_found")
        return tool

    # Ratings

    def rate(self, tool_id: str, actor, value) -> RatingResponse:
        """Insert or overwrite the actor's rating for a tool"""
        value = validate_rating(value)
        self._visible_tool(tool_id, actor)
        try:
            result = self.supabase.table("tool_ratings").upsert({
                "tool_id": tool_id,
                "user_id": actor.id,
                "rating": value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }, on_conflict="tool_id,user_id").execute()
        except Exception as e:
            raise store_error("Error submitting rating", e)
        row = result.data[0] if result.data else {"tool_id": tool_id, "user_id": actor.id, "rating": value}
        return RatingResponse(**row)

    def get_my_rating(self, tool_id: str, actor) -> Optional[RatingResponse]:
        try:
            result = self.supabase.table("tool_ratings")\
                .select("*")\
                .eq("tool_id", tool_id)\
                .eq("user_id", actor.id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise store_error("Error fetching rating", e)
        if result is None or not result.data:
            return None
        return RatingResponse(**result.data)

    def remove_rating(self, tool_id: str, actor) -> bool:
        try:
            result = self.supabase.table("tool_ratings")\
                .delete()\
                .eq("tool_id", tool_id)\
                .eq("user_id", actor.id)\
                .execute()
            return len(result.data or []) > 0
        except Exception as e:
            raise store_error("Error removing rating", e)

    def tool_stats(self, tool_id: str, actor) -> ToolStats:
        """Stats for a tool the actor can see; invisible tools are not found."""
        self._visible_tool(tool_id, actor)
        return self.aggregate(tool_id)

    def aggregate(self, tool_id: str) -> ToolStats:
        """Recomputed on every call. Unknown or deleted tools aggregate to zeros."""
        return self.aggregate_many([tool_id])[tool_id]

    def aggregate_many(self, tool_ids: List[str]) -> Dict[str, ToolStats]:
        if not tool_ids:
            return {}
        try:
            ratings = self.supabase.table("tool_ratings")\
                .select("tool_id, rating")\
                .in_("tool_id", tool_ids)\
                .execute()
            comments = self.supabase.table("tool_comments")\
                .select("tool_id")\
                .in_("tool_id", tool_ids)\
                .execute()
        except Exception as e:
            raise store_error("Error fetching tool statistics", e)
        by_tool: Dict[str, List[int]] = {tid: [] for tid in tool_ids}
        for r in ratings.data or []:
            by_tool.setdefault(r["tool_id"], []).append(r["rating"])
        comment_counts: Dict[str, int] = {}
        for c in comments.data or []:
            comment_counts[c["tool_id"]] = comment_counts.get(c["tool_id"], 0) + 1
        return {
            tid: aggregate_ratings(tid, by_tool.get(tid, []), comment_counts.get(tid, 0))
            for tid in tool_ids
        }

    # Comments

    def list_comments(self, tool_id: str, actor) -> List[CommentResponse]:
        """Comments for a tool, newest first, with author names"""
        self._visible_tool(tool_id, actor)
        try:
            result = self.supabase.table("tool_comments")\
                .select("*")\
                .eq("tool_id", tool_id)\
                .order("created_at", desc=True)\
                .execute()
            rows = result.data or []
            user_ids = list({r["user_id"] for r in rows})
            authors = {}
            if user_ids:
                profiles = self.supabase.table("profiles")\
                    .select("id, full_name, email")\
                    .in_("id", user_ids)\
                    .execute()
                authors = {p["id"]: CommentAuthor(**p) for p in profiles.data or []}
        except Exception as e:
            raise store_error("Error fetching comments", e)
        return [CommentResponse(**r, user=authors.get(r["user_id"])) for r in rows]

    def get_comment(self, comment_id: str) -> CommentResponse:
        try:
            result = self.supabase.table("tool_comments")\
                .select("*")\
                .eq("id", comment_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise store_error("Error fetching comment", e)
        if result is None or not result.data:
            raise not_found("comment_not_found")
        return CommentResponse(**result.data)

    def comment(self, tool_id: str, actor, content: str) -> CommentResponse:
        content = validate_comment(content)
        self._visible_tool(tool_id, actor)
        try:
            result = self.supabase.table("tool_comments").insert({
                "tool_id": tool_id,
                "user_id": actor.id,
                "content": content,
            }).execute()
        except Exception as e:
            raise store_error("Error submitting comment", e)
        if not result.data:
            raise store_error("Error submitting comment", RuntimeError("empty insert result"))
        return CommentResponse(**result.data[0])

    def edit_comment(self, comment_id: str, actor, content: str) -> CommentResponse:
        """Only the author rewrites a comment"""
        content = validate_comment(content)
        existing = self.get_comment(comment_id)
        if not can_update_comment(existing, actor):
            raise forbidden()
        try:
            result = self.supabase.table("tool_comments")\
                .update({"content": content, "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", comment_id)\
                .execute()
        except Exception as e:
            raise store_error("Error updating comment", e)
        if not result.data:
            raise not_found("comment_not_found")
        return CommentResponse(**result.data[0])

    def delete_comment(self, comment_id: str, actor) -> bool:
        """Author, or owner as moderator"""
        existing = self.get_comment(comment_id)
        if not can_edit_comment(existing, actor):
            raise forbidden()
        try:
            self.supabase.table("tool_comments").delete().eq("id", comment_id).execute()
        except Exception as e:
            raise store_error("Error deleting comment", e)
        if existing.user_id != actor.id:
            logger.info(f"Comment {comment_id} removed by moderator {actor.id}")
        return True
