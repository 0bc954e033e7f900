"""Schemas for review endpoints."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

MAX_REVIEW_IMAGES = 3


class ReviewCreate(BaseModel):
    """Schema for creating a review."""

    rating: int = Field(..., ge=1, le=5, description="Rating score 1-5")
    title: Optional[str] = Field(None, max_length=255)
    comment: Optional[str] = Field(None, max_length=5000)
    images: List[str] = Field(default_factory=list, max_length=MAX_REVIEW_IMAGES)


class ReviewUpdate(BaseModel):
    """Schema for updating a review."""

    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, max_length=255)
    comment: Optional[str] = Field(None, max_length=5000)
    images: Optional[List[str]] = Field(None, max_length=MAX_REVIEW_IMAGES)


class ReviewResponse(BaseModel):
    """Schema for review response."""

    uuid: str
    product_id: str
    user_id: str
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    images: List[str]
    is_verified_purchase: bool
    helpful_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
