"""Password hashing and signed session tokens."""
from datetime import datetime, timedelta
from typing import Optional
import hmac

import bcrypt
import jwt

from storefront.config import settings

USER_SCOPE = "user"
ADMIN_SCOPE = "admin"


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        return False


def verify_admin_credentials(username: str, password: str) -> bool:
    """Compare admin panel credentials in constant time."""
    username_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return username_ok and password_ok


def create_session_token(subject: str, scope: str = USER_SCOPE, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed session token for a user or the admin panel."""
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=settings.SESSION_MAX_AGE_HOURS))
    payload = {"sub": subject, "scope": scope, "exp": expire}
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[dict]:
    """Decode a session token. Returns None when invalid or expired."""
    try:
        return jwt.decode(token, settings.SESSION_SECRET, algorithms=[settings.SESSION_ALGORITHM])
    except jwt.PyJWTError:
        return None
