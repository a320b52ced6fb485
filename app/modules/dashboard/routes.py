from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.dashboard.schemas import DashboardStats, RoleInfo
from app.modules.dashboard.service import DashboardService
from app.modules.profiles.schemas import ProfileResponse
from app.core.cache import TTLCache
from app.core.dependencies import get_cache, get_current_profile
from supabase import Client
from typing import List

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(
    supabase: Client = Depends(get_supabase),
    cache: TTLCache = Depends(get_cache),
) -> DashboardService:
    return DashboardService(supabase, cache)


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    actor: ProfileResponse = Depends(get_current_profile),
    service: DashboardService = Depends(get_dashboard_service),
):
    return service.get_stats()


@router.get("/roles", response_model=List[RoleInfo])
async def get_roles(service: DashboardService = Depends(get_dashboard_service)):
    """Display name, icon and colour per role"""
    return service.role_directory()
