from enum import Enum
from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class ActivityAction(str, Enum):
    LOGIN = "login"
    LOGOUT = "logout"
    CREATE_TOOL = "create_tool"
    UPDATE_TOOL = "update_tool"
    DELETE_TOOL = "delete_tool"
    APPROVE_TOOL = "approve_tool"
    REJECT_TOOL = "reject_tool"
    ENABLE_2FA = "enable_2fa"
    DISABLE_2FA = "disable_2fa"
    CREATE_CATEGORY = "create_category"
    UPDATE_CATEGORY = "update_category"
    DELETE_CATEGORY = "delete_category"


class ResourceType(str, Enum):
    AUTH = "auth"
    AI_TOOL = "ai_tool"
    CATEGORY = "category"
    PROFILE = "profile"
    SYSTEM = "system"


class ActivityLogUser(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None


class ActivityLogResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    action: ActivityAction
    resource_type: ResourceType
    resource_id: Optional[str] = None
    details: Dict[str, Any] = {}
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
    user: Optional[ActivityLogUser] = None

    class Config:
        from_attributes = True
