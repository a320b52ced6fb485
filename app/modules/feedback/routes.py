from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.feedback.schemas import (
    RatingRequest, RatingResponse, CommentRequest, CommentResponse, ToolStats
)
from app.modules.feedback.service import FeedbackService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import get_current_profile
from supabase import Client
from typing import List, Optional

router = APIRouter(tags=["feedback"])


def get_feedback_service(supabase: Client = Depends(get_supabase)) -> FeedbackService:
    return FeedbackService(supabase)


@router.put("/tools/{tool_id}/rating", response_model=RatingResponse)
async def rate_tool(
    tool_id: str,
    body: RatingRequest,
    actor: ProfileResponse = Depends(get_current_profile),
    service: FeedbackService = Depends(get_feedback_service),
):
    """Rate a tool 1-5; rating again replaces the previous value"""
    return service.rate(tool_id, actor, body.rating)


@router.get("/tools/{tool_id}/rating", response_model=Optional[RatingResponse])
async def get_my_rating(
    tool_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: FeedbackService = Depends(get_feedback_service),
):
    return service.get_my_rating(tool_id, actor)


@router.delete("/tools/{tool_id}/rating", status_code=204)
async def remove_rating(
    tool_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: FeedbackService = Depends(get_feedback_service),
):
    service.remove_rating(tool_id, actor)
    return None


@router.get("/tools/{tool_id}/stats", response_model=ToolStats)
async def get_tool_stats(
    tool_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: FeedbackService = Depends(get_feedback_service),
):
    """Average rating and counts, recomputed on every request"""
    return service.tool_stats(tool_id, actor)


@router.get("/tools/{tool_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    tool_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: FeedbackService = Depends(get_feedback_service),
):
    return service.list_comments(tool_id, actor)


@router.post("/tools/{tool_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    tool_id: str,
    body: CommentRequest,
    actor: ProfileResponse = Depends(get_current_profile),
    service: FeedbackService = Depends(get_feedback_service),
):
    return service.comment(tool_id, actor, body.content)


@router.put("/comments/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    comment_id: str,
    body: CommentRequest,
    actor: ProfileResponse = Depends(get_current_profile),
    service: FeedbackService = Depends(get_feedback_service),
):
    return service.edit_comment(comment_id, actor, body.content)


@router.delete("/comments/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: FeedbackService = Depends(get_feedback_service),
):
    """Delete a comment (author, or owner as moderator)"""
    service.delete_comment(comment_id, actor)
    return None
