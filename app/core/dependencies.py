"""
Core dependencies for route protection and per-request collaborators
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.config.roles_config import Role
from app.core.cache import TTLCache
from app.core.messages import msg
from app.database.supabase_client import get_supabase, get_auth_client
from app.modules.activity.service import ActivityLogger
from app.modules.auth.service import AuthService
from app.modules.auth.two_factor import TwoFactorChallengeStore, LoggingCodeSender
from app.modules.profiles.schemas import ProfileResponse
from app.modules.profiles.service import ProfileService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_cache(request: Request) -> TTLCache:
    """Application cache for reference reads (categories, dashboard counts)."""
    return request.app.state.cache


def get_auth_cache(request: Request) -> TTLCache:
    return request.app.state.auth_cache


def get_challenge_store(request: Request) -> TwoFactorChallengeStore:
    return request.app.state.challenges


def get_code_sender(request: Request) -> LoggingCodeSender:
    return request.app.state.code_sender


def get_user_agent(request: Request) -> Optional[str]:
    return request.headers.get("user-agent")


def get_activity_logger(
    user_agent: Optional[str] = Depends(get_user_agent),
    supabase: Client = Depends(get_supabase),
) -> ActivityLogger:
    return ActivityLogger(supabase, user_agent=user_agent)


def get_auth_service(
    auth_client: Client = Depends(get_auth_client),
    auth_cache: TTLCache = Depends(get_auth_cache),
) -> AuthService:
    return AuthService(
        auth_client,
        token_cache=auth_cache,
        cache_ttl=settings.auth_cache_ttl,
        cache_max_size=settings.auth_cache_max_size,
    )


def get_profile_service(
    supabase: Client = Depends(get_supabase),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> ProfileService:
    return ProfileService(supabase, activity)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_current_profile(
    user_data: dict = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """The acting profile (id + role) every policy check runs against"""
    try:
        return profile_service.get_profile(user_data["id"])
    except HTTPException as e:
        if e.status_code == status.HTTP_404_NOT_FOUND:
            # Profile row is created by the signup trigger; without it the user has no role
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=msg("profile_not_found"))
        raise


def require_role(*allowed_roles: Role):
    """Factory function to create a role check dependency"""
    def check_role(profile: ProfileResponse = Depends(get_current_profile)) -> ProfileResponse:
        if profile.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=msg("access_denied")
            )
        return profile
    return check_role


require_owner = require_role(Role.OWNER)
