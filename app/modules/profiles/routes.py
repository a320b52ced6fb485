from fastapi import APIRouter, Depends
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, TwoFactorToggle
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_profile, get_profile_service
from typing import List

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    limit: int = 100,
    offset: int = 0,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service),
):
    """List team profiles"""
    return service.list_profiles(limit=limit, offset=offset)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(actor: ProfileResponse = Depends(get_current_profile)):
    return actor


@router.put("/me/two-factor", response_model=ProfileResponse)
async def set_two_factor(
    body: TwoFactorToggle,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service),
):
    """Enable or disable two-factor login for the current user"""
    return service.set_two_factor(actor.id, actor, body.enabled)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_profile(profile_id)


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    body: ProfileUpdate,
    actor: ProfileResponse = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service),
):
    """Update a profile (own profile, or any as owner; role changes owner-only)"""
    return service.update_profile(profile_id, actor, body)
