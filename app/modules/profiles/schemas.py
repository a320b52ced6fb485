from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.config.roles_config import Role


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    role: Optional[Role] = None  # owner only


class TwoFactorToggle(BaseModel):
    enabled: bool


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: Role
    two_factor_enabled: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
