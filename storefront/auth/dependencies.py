"""FastAPI dependencies for authentication and authorization.

Two independent principals exist: catalog users (session cookie carrying a
user-scoped token) and the admin panel (separate cookie carrying an
admin-scoped token). Logging into one never authenticates the other.
"""
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from storefront.config import settings
from storefront.database import get_db
from storefront.models.user import User
from storefront.auth.security import decode_session_token, USER_SCOPE, ADMIN_SCOPE

user_session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)
admin_session_cookie = APIKeyCookie(name=settings.ADMIN_SESSION_COOKIE_NAME, auto_error=False)


@dataclass
class Principal:
    """Who is calling: an optional catalog user and/or an admin panel session."""

    user: Optional[User] = None
    admin_session: bool = False

    def current_user(self) -> Optional[User]:
        return self.user

    def is_admin(self) -> bool:
        return self.admin_session


async def _load_session_user(token: Optional[str], db: AsyncSession) -> Optional[User]:
    if not token:
        return None
    payload = decode_session_token(token)
    if payload is None or payload.get("scope") != USER_SCOPE:
        return None
    user_id = payload.get("sub")
    if not user_id:
        return None
    result = await db.execute(select(User).where(User.uuid == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user


def _has_admin_session(token: Optional[str]) -> bool:
    if not token:
        return False
    payload = decode_session_token(token)
    return payload is not None and payload.get("scope") == ADMIN_SCOPE


async def get_principal(
    user_token: Optional[str] = Depends(user_session_cookie),
    admin_token: Optional[str] = Depends(admin_session_cookie),
    db: AsyncSession = Depends(get_db)
) -> Principal:
    """Resolve both session cookies. Never raises; endpoints decide what they require."""
    return Principal(
        user=await _load_session_user(user_token, db),
        admin_session=_has_admin_session(admin_token),
    )


async def get_optional_user(principal: Principal = Depends(get_principal)) -> Optional[User]:
    """The logged-in catalog user, if any."""
    return principal.current_user()


async def get_current_user(principal: Principal = Depends(get_principal)) -> User:
    """
    FastAPI dependency requiring a logged-in, active catalog user.
    Raises HTTPException 401 otherwise.
    """
    user = principal.current_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return user


async def admin_role_required(current_user: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency to ensure the current catalog user has the admin role.
    Used for discount code management.
    """
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


async def admin_session_required(principal: Principal = Depends(get_principal)) -> Principal:
    """
    FastAPI dependency requiring the admin panel session.
    Raises HTTPException 401 when the admin is not logged in.
    """
    if not principal.is_admin():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return principal
