"""Schemas for support tickets and FAQ."""
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, EmailStr, Field


class SupportTicketCreate(BaseModel):
    """Schema for submitting a support ticket."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=10000)
    category: Literal["general", "technical", "billing", "refund"] = "general"
    priority: Literal["low", "medium", "high", "urgent"] = "medium"


class SupportTicketResponse(BaseModel):
    uuid: str
    user_id: Optional[str] = None
    name: str
    email: str
    subject: str
    message: str
    category: str
    priority: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class SupportTicketCreated(BaseModel):
    success: bool = True
    message: str
    ticket_id: str
    status: str
    created_at: datetime


class FaqItemResponse(BaseModel):
    uuid: str
    question: str
    answer: str
    category: str
    sort_order: int
    helpful_count: int

    class Config:
        from_attributes = True
