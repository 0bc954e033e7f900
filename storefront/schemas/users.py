"""User self-service schemas: profile, password, avatar, account deletion and activity."""
from datetime import datetime
from typing import Optional, Any
from pydantic import BaseModel, EmailStr, Field, field_validator

from storefront.schemas.auth import check_password_strength


class ProfileUpdate(BaseModel):
    """Schema for user self-service profile update. Password and role are not editable here."""

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)


class PasswordChange(BaseModel):
    """Schema for changing the current user's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)

    @field_validator("new_password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)


class AvatarUpload(BaseModel):
    """Avatar as a URL or base64 data URI."""

    avatar: str = Field(..., min_length=1)


class AvatarResponse(BaseModel):
    avatar: str


class AccountDelete(BaseModel):
    """Password confirmation required to delete an account."""

    password: str = Field(..., min_length=1)


class ActivityResponse(BaseModel):
    """Schema for a user activity entry."""

    uuid: str
    action: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True
