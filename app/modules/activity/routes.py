from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.activity.schemas import ActivityAction, ActivityLogResponse, ResourceType
from app.modules.activity.service import ActivityService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import get_current_profile, require_owner
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/activity", tags=["activity"])


def get_activity_service(supabase: Client = Depends(get_supabase)) -> ActivityService:
    return ActivityService(supabase)


@router.get("", response_model=List[ActivityLogResponse])
async def list_activity(
    action: Optional[ActivityAction] = None,
    resource_type: Optional[ResourceType] = None,
    user_id: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = None,
    actor: ProfileResponse = Depends(require_owner),
    service: ActivityService = Depends(get_activity_service),
):
    """Audit trail, newest first (owner only)"""
    return service.list_logs(
        actor, action=action, resource_type=resource_type,
        user_id=user_id, search=search, limit=limit,
    )


@router.get("/me", response_model=List[ActivityLogResponse])
async def list_my_activity(
    limit: Optional[int] = None,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ActivityService = Depends(get_activity_service),
):
    return service.list_own_logs(actor, limit=limit)
