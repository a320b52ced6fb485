from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.config.roles_config import Role, ToolStatus, DifficultyLevel, PricingModel
from app.modules.feedback.schemas import ToolStats


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class ToolCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category_id: Optional[str] = None
    website_url: Optional[str] = None
    documentation_url: Optional[str] = None
    video_url: Optional[str] = None
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    pricing_model: PricingModel = PricingModel.FREE
    tags: List[str] = []
    roles: List[Role] = []

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return _clean_tags(v)


class ToolUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category_id: Optional[str] = None
    website_url: Optional[str] = None
    documentation_url: Optional[str] = None
    video_url: Optional[str] = None
    difficulty_level: Optional[DifficultyLevel] = None
    pricing_model: Optional[PricingModel] = None
    tags: Optional[List[str]] = None
    roles: Optional[List[Role]] = None  # None leaves role tags untouched; [] clears them

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return _clean_tags(v)


class RejectRequest(BaseModel):
    reason: Optional[str] = None


class ToolResponse(BaseModel):
    id: str
    name: str
    description: str
    category_id: Optional[str] = None
    website_url: Optional[str] = None
    documentation_url: Optional[str] = None
    video_url: Optional[str] = None
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    pricing_model: PricingModel = PricingModel.FREE
    tags: List[str] = []
    status: ToolStatus = ToolStatus.PENDING
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    roles: List[Role] = []
    stats: Optional[ToolStats] = None

    class Config:
        from_attributes = True
