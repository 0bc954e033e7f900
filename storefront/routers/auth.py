"""Authentication router for user registration, login and session cookies."""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select

from storefront.database import get_db
from storefront.config import settings
from storefront.limiter import limiter
from storefront.models.user import User
from storefront.schemas.auth import UserRegister, UserLogin, UserResponse, MessageResponse
from storefront.auth.security import hash_password, verify_password, create_session_token
from storefront.auth.cookies import set_session_cookie, clear_session_cookie
from storefront.auth.dependencies import get_current_user
from storefront.services.tracking import log_activity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def register(
    request: Request,
    response: Response,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user.

    - Validates input (password strength, email format)
    - Checks username uniqueness
    - Hashes password with bcrypt
    - Logs the new user in (session cookie)
    """
    username_taken = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Username already exists"
    )
    result = await db.execute(select(User).where(User.username == user_data.username))
    if result.scalar_one_or_none():
        raise username_taken

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        password_hash=hash_password(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        role="user",
        is_active=True,
        last_login=datetime.utcnow(),
    )
    db.add(new_user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise username_taken

    await log_activity(db, new_user.uuid, "register", request=request)
    await db.commit()
    await db.refresh(new_user)

    set_session_cookie(response, settings.SESSION_COOKIE_NAME, create_session_token(new_user.uuid))
    logger.info(f"User registered: {new_user.username} ({new_user.uuid})")
    return new_user


@router.post("/login", response_model=UserResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login with username and password. Sets the user session cookie."""
    result = await db.execute(select(User).where(User.username == credentials.username))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Failed login attempt for username {credentials.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled"
        )

    user.last_login = datetime.utcnow()
    await log_activity(db, user.uuid, "login", request=request)
    await db.commit()
    await db.refresh(user)

    set_session_cookie(response, settings.SESSION_COOKIE_NAME, create_session_token(user.uuid))
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the user session cookie. Safe to call when not logged in."""
    clear_session_cookie(response, settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Return the logged-in user."""
    return current_user
