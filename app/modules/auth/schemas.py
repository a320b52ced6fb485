import email_validator
from enum import Enum
from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Dict

from app.modules.profiles.schemas import ProfileResponse

# Seeded team accounts live on the reserved .local domain
if "local" in email_validator.SPECIAL_USE_DOMAIN_NAMES:
    email_validator.SPECIAL_USE_DOMAIN_NAMES.remove("local")


class LoginState(str, Enum):
    AWAITING_CREDENTIALS = "awaiting_credentials"
    AWAITING_CODE = "awaiting_code"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TwoFactorVerifyRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., max_length=16)


class TwoFactorEmailRequest(BaseModel):
    email: EmailStr


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    email: str


class LoginResponse(BaseModel):
    status: LoginState
    email: str
    message: Optional[str] = None
    session: Optional[TokenResponse] = None


class MeResponse(BaseModel):
    user: Dict
    profile: ProfileResponse
    capabilities: Dict[str, bool]
