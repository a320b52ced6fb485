from supabase import Client
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from app.modules.activity.schemas import ActivityAction, ResourceType
from app.modules.activity.service import ActivityLogger
from app.core.errors import forbidden, not_found, store_error
from app.core.policy import can_edit_profile, can_change_role, can_toggle_two_factor
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import HTTPException


class ProfileService:
    def __init__(self, supabase: Client, activity: Optional[ActivityLogger] = None):
        self.supabase = supabase
        self.activity = activity

    def get_profile(self, profile_id: str) -> ProfileResponse:
        """Get profile by ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", profile_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise store_error("Error fetching profile", e)
        if result is None or not result.data:
            raise not_found("profile_not_found")
        return ProfileResponse(**result.data)

    def list_profiles(self, limit: int = 100, offset: int = 0) -> List[ProfileResponse]:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .order("full_name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ProfileResponse(**p) for p in result.data or []]
        except Exception as e:
            raise store_error("Error listing profiles", e)

    def update_profile(self, profile_id: str, actor: ProfileResponse, data: ProfileUpdate) -> ProfileResponse:
        """Update own profile, or any profile as owner. Role changes are owner-only."""
        if not can_edit_profile(profile_id, actor):
            raise forbidden()
        if data.role is not None and not can_change_role(actor):
            raise forbidden()
        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        if data.full_name is not None:
            update_data["full_name"] = data.full_name
        if data.role is not None:
            update_data["role"] = data.role.value
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", profile_id)\
                .execute()
        except Exception as e:
            raise store_error("Error updating profile", e)
        if not result.data:
            raise not_found("profile_not_found")
        return ProfileResponse(**result.data[0])

    def set_two_factor(self, profile_id: str, actor: ProfileResponse, enabled: bool) -> ProfileResponse:
        """Toggle two_factor_enabled. Only the profile's own user may do this."""
        if not can_toggle_two_factor(profile_id, actor):
            raise forbidden()
        action = ActivityAction.ENABLE_2FA if enabled else ActivityAction.DISABLE_2FA
        try:
            result = self.supabase.table("profiles")\
                .update({
                    "two_factor_enabled": enabled,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", profile_id)\
                .execute()
            if not result.data:
                raise not_found("profile_not_found")
        except HTTPException:
            raise
        except Exception as e:
            self._log(action, actor, {"error": str(e), "user_email": actor.email, "success": False})
            raise store_error("Error toggling 2FA", e)

        self._log(action, actor, {
            "two_factor_enabled": enabled,
            "user_email": actor.email,
            "changed_at": datetime.now(timezone.utc).isoformat(),
        })
        return ProfileResponse(**result.data[0])

    def _log(self, action: ActivityAction, actor: ProfileResponse, details: dict) -> None:
        if self.activity:
            self.activity.log(
                action, ResourceType.PROFILE,
                user_id=actor.id, resource_id=actor.id, details=details
            )
