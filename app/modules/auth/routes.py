from fastapi import APIRouter, Depends
from app.config.roles_config import get_capabilities
from app.core.cache import TTLCache
from app.core.dependencies import (
    get_activity_logger, get_auth_service, get_cache, get_challenge_store,
    get_code_sender, get_current_profile, get_current_token, get_current_user_id,
    get_profile_service,
)
from app.core.messages import msg
from app.modules.activity.schemas import ActivityAction, ResourceType
from app.modules.activity.service import ActivityLogger
from app.modules.auth.login_flow import LoginFlow
from app.modules.auth.schemas import (
    LoginRequest, LoginResponse, LoginState, MeResponse,
    TwoFactorEmailRequest, TwoFactorVerifyRequest,
)
from app.modules.auth.service import AuthService
from app.modules.auth.two_factor import TwoFactorChallengeStore, LoggingCodeSender
from app.modules.profiles.schemas import ProfileResponse
from app.modules.profiles.service import ProfileService
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_login_flow_args(
    auth_service: AuthService = Depends(get_auth_service),
    profile_service: ProfileService = Depends(get_profile_service),
    challenges: TwoFactorChallengeStore = Depends(get_challenge_store),
    code_sender: LoggingCodeSender = Depends(get_code_sender),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> dict:
    return {
        "auth_service": auth_service,
        "profile_service": profile_service,
        "challenges": challenges,
        "code_sender": code_sender,
        "activity": activity,
    }


def _response(flow: LoginFlow, message: str = None) -> LoginResponse:
    return LoginResponse(
        status=flow.state,
        email=flow.email or "",
        message=message,
        session=flow.session if flow.state == LoginState.AUTHENTICATED else None,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    flow_args: dict = Depends(get_login_flow_args),
):
    """Password step. Returns a session, or awaiting_code when the account has 2FA enabled"""
    flow = LoginFlow(**flow_args)
    flow.submit_credentials(login_data.email, login_data.password)
    message = msg("code_sent") if flow.state == LoginState.AWAITING_CODE else None
    return _response(flow, message)


@router.post("/2fa/verify", response_model=LoginResponse)
async def verify_two_factor(
    request: TwoFactorVerifyRequest,
    flow_args: dict = Depends(get_login_flow_args),
):
    """Code step. A wrong code leaves the login waiting for a code"""
    flow = LoginFlow.resume(request.email, **flow_args)
    flow.verify_code(request.code)
    return _response(flow)


@router.post("/2fa/resend", response_model=LoginResponse)
async def resend_two_factor_code(
    request: TwoFactorEmailRequest,
    flow_args: dict = Depends(get_login_flow_args),
):
    """Issue a new code; the previous one stops working"""
    flow = LoginFlow.resume(request.email, **flow_args)
    flow.resend_code()
    return _response(flow, msg("code_sent"))


@router.post("/2fa/cancel", response_model=LoginResponse)
async def cancel_two_factor(
    request: TwoFactorEmailRequest,
    flow_args: dict = Depends(get_login_flow_args),
):
    """Abandon a login that is waiting for a code"""
    flow = LoginFlow.resume(request.email, **flow_args)
    flow.cancel()
    return LoginResponse(status=flow.state, email=request.email)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    user_data: Dict = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
    activity: ActivityLogger = Depends(get_activity_logger),
    cache: TTLCache = Depends(get_cache),
):
    """Logout and invalidate token"""
    activity.log(ActivityAction.LOGOUT, ResourceType.AUTH, user_id=user_data["id"])
    service.logout(token)
    cache.invalidate_all()
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    user_data: Dict = Depends(get_current_user_id),
    profile: ProfileResponse = Depends(get_current_profile),
):
    """Current user, profile and capability flags (for frontend UI)."""
    return MeResponse(user=user_data, profile=profile, capabilities=get_capabilities(profile.role))
