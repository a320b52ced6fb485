from pydantic import BaseModel
from typing import Optional


class DashboardStats(BaseModel):
    tools: int = 0
    categories: int = 0
    users: int = 0


class RoleInfo(BaseModel):
    role: str
    display_name: str
    icon: str
    color: str
    description: Optional[str] = None
