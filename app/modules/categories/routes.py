from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.categories.schemas import CategoryCreate, CategoryUpdate, CategoryResponse
from app.modules.categories.service import CategoryService
from app.modules.activity.service import ActivityLogger
from app.modules.profiles.schemas import ProfileResponse
from app.core.cache import TTLCache
from app.core.dependencies import get_activity_logger, get_cache, get_current_profile, require_owner
from supabase import Client
from typing import List

router = APIRouter(prefix="/categories", tags=["categories"])


def get_category_service(
    supabase: Client = Depends(get_supabase),
    cache: TTLCache = Depends(get_cache),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> CategoryService:
    return CategoryService(supabase, cache, activity)


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    actor: ProfileResponse = Depends(get_current_profile),
    service: CategoryService = Depends(get_category_service),
):
    """List all categories"""
    return service.list_categories()


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    body: CategoryCreate,
    actor: ProfileResponse = Depends(get_current_profile),
    service: CategoryService = Depends(get_category_service),
):
    return service.create_category(body, actor)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: CategoryService = Depends(get_category_service),
):
    return service.get_category(category_id)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    actor: ProfileResponse = Depends(get_current_profile),
    service: CategoryService = Depends(get_category_service),
):
    return service.update_category(category_id, body, actor)


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    actor: ProfileResponse = Depends(require_owner),
    service: CategoryService = Depends(get_category_service),
):
    """Delete category (owner only)"""
    service.delete_category(category_id, actor)
    return None
