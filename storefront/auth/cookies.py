"""Session cookie helpers shared by the user and admin login routes."""
from fastapi import Response

from storefront.config import settings


def set_session_cookie(response: Response, name: str, token: str) -> None:
    """Attach a signed session token as an http-only cookie."""
    response.set_cookie(
        key=name,
        value=token,
        max_age=settings.SESSION_MAX_AGE_HOURS * 3600,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="none" if settings.secure_cookies else "lax",
        domain=settings.COOKIE_DOMAIN or None,
        path="/",
    )


def clear_session_cookie(response: Response, name: str) -> None:
    response.delete_cookie(
        key=name,
        domain=settings.COOKIE_DOMAIN or None,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="none" if settings.secure_cookies else "lax",
    )
