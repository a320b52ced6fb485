from pydantic import BaseModel, Field, StrictInt, field_validator
from typing import Optional
from datetime import datetime


class RatingRequest(BaseModel):
    rating: StrictInt = Field(..., ge=1, le=5)


class RatingResponse(BaseModel):
    tool_id: str
    user_id: str
    rating: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CommentRequest(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment cannot be empty")
        return v


class CommentAuthor(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None


class CommentResponse(BaseModel):
    id: str
    tool_id: str
    user_id: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[CommentAuthor] = None

    class Config:
        from_attributes = True


class ToolStats(BaseModel):
    tool_id: str
    average_rating: float = 0.0
    total_ratings: int = 0
    total_comments: int = 0
