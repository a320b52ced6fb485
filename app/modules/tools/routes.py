from fastapi import APIRouter, Depends
from app.config.roles_config import Role, ToolStatus
from app.database.supabase_client import get_supabase
from app.modules.tools.schemas import ToolCreate, ToolUpdate, ToolResponse, RejectRequest
from app.modules.tools.service import ToolService
from app.modules.activity.service import ActivityLogger
from app.modules.feedback.service import FeedbackService
from app.modules.profiles.schemas import ProfileResponse
from app.core.cache import TTLCache
from app.core.dependencies import get_activity_logger, get_cache, get_current_profile, require_owner
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/tools", tags=["tools"])


def get_tool_service(
    supabase: Client = Depends(get_supabase),
    cache: TTLCache = Depends(get_cache),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> ToolService:
    return ToolService(supabase, cache, activity, FeedbackService(supabase))


@router.get("", response_model=List[ToolResponse])
async def list_tools(
    category_id: Optional[str] = None,
    status: Optional[ToolStatus] = None,
    role: Optional[Role] = None,
    search: Optional[str] = None,
    include_stats: bool = True,
    limit: int = 100,
    offset: int = 0,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ToolService = Depends(get_tool_service),
):
    """List visible tools: approved ones plus the caller's own (owners see all)."""
    return service.list_tools(
        actor, category_id=category_id, status_filter=status, role=role,
        search=search, include_stats=include_stats, limit=limit, offset=offset,
    )


@router.post("", response_model=ToolResponse, status_code=201)
async def submit_tool(
    body: ToolCreate,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ToolService = Depends(get_tool_service),
):
    """Submit a tool; it stays pending until an owner approves it"""
    return service.submit(actor, body)


@router.get("/{tool_id}", response_model=ToolResponse)
async def get_tool(
    tool_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ToolService = Depends(get_tool_service),
):
    return service.get_tool(tool_id, actor)


@router.put("/{tool_id}", response_model=ToolResponse)
async def update_tool(
    tool_id: str,
    body: ToolUpdate,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ToolService = Depends(get_tool_service),
):
    """Update tool (creator or owner)"""
    return service.edit(tool_id, actor, body)


@router.delete("/{tool_id}", status_code=204)
async def delete_tool(
    tool_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ToolService = Depends(get_tool_service),
):
    """Delete tool with its role tags, ratings and comments (creator or owner)"""
    service.delete(tool_id, actor)
    return None


@router.post("/{tool_id}/approve", response_model=ToolResponse)
async def approve_tool(
    tool_id: str,
    moderator: ProfileResponse = Depends(require_owner),
    service: ToolService = Depends(get_tool_service),
):
    return service.approve(tool_id, moderator)


@router.post("/{tool_id}/reject", response_model=ToolResponse)
async def reject_tool(
    tool_id: str,
    body: Optional[RejectRequest] = None,
    moderator: ProfileResponse = Depends(require_owner),
    service: ToolService = Depends(get_tool_service),
):
    return service.reject(tool_id, moderator, body.reason if body else None)
