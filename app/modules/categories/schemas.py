from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

DEFAULT_COLOR = "#3B82F6"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    color: str = Field(DEFAULT_COLOR, pattern=COLOR_PATTERN)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: str = DEFAULT_COLOR
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
