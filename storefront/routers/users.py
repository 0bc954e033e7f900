"""User self-service endpoints for profile, password, avatar, account deletion and activity."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.config import settings
from storefront.models.user import User
from storefront.schemas.auth import UserResponse, MessageResponse
from storefront.schemas.users import (
    ProfileUpdate, PasswordChange, AvatarUpload, AvatarResponse, AccountDelete, ActivityResponse,
)
from storefront.auth.dependencies import get_current_user
from storefront.auth.security import hash_password, verify_password
from storefront.auth.cookies import clear_session_cookie
from storefront.services.tracking import log_activity, list_activity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get current user's profile information."""
    return current_user


@router.patch("/api/profile", response_model=UserResponse)
async def update_profile(
    profile_update: ProfileUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update current user's profile.

    - Can update: email, first_name, last_name
    - Password and role are not editable here
    """
    changes = profile_update.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(current_user, field, value)

    await log_activity(db, current_user.uuid, "update_profile", details={"fields": sorted(changes)}, request=request)
    await db.commit()
    await db.refresh(current_user)
    return current_user


@router.patch("/api/profile/password", response_model=MessageResponse)
async def change_password(
    password_change: PasswordChange,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Change password after re-checking the current one."""
    if not verify_password(password_change.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    current_user.password_hash = hash_password(password_change.new_password)
    await log_activity(db, current_user.uuid, "change_password", request=request)
    await db.commit()

    logger.info(f"Password changed for user {current_user.uuid}")
    return MessageResponse(message="Password updated successfully")


@router.post("/api/profile/avatar", response_model=AvatarResponse)
async def upload_avatar(
    avatar_upload: AvatarUpload,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Store an avatar URL or base64 data URI."""
    current_user.avatar = avatar_upload.avatar
    await db.commit()
    await db.refresh(current_user)
    return AvatarResponse(avatar=current_user.avatar)


@router.delete("/api/profile", response_model=MessageResponse)
async def delete_account(
    account_delete: AccountDelete,
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete the caller's account after password confirmation.

    The account is deactivated rather than removed so order history stays
    intact; the session cookie is cleared and the user can no longer log in.
    """
    if not verify_password(account_delete.password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Incorrect password"
        )

    current_user.is_active = False
    await log_activity(db, current_user.uuid, "delete_account", request=request)
    await db.commit()

    clear_session_cookie(response, settings.SESSION_COOKIE_NAME)
    logger.info(f"Account deactivated: {current_user.uuid}")
    return MessageResponse(message="Account deleted successfully")


@router.get("/api/user/activity", response_model=list[ActivityResponse])
async def get_activity(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """The caller's most recent activity, newest first."""
    return await list_activity(db, current_user.uuid)
