# =============================================================================
# ASSETDESK - SECURITY
# =============================================================================
# Password hashing (bcrypt) and JWT creation/validation (PyJWT, HS256).
#
# Token payload:
#     {"id": 3, "username": "jane", "role": "admin", "iat": ..., "exp": ...}
# =============================================================================

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
import jwt

from ..config import config
from .models import CurrentUser, UserRole


# =============================================================================
# PASSWORDS
# =============================================================================

def hash_password(password: str) -> str:
    """
    bcrypt hash of a plain password.

    The salt is random and embedded in the result, so the same input
    produces a different hash every time.
    """
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        return False


# =============================================================================
# TOKENS
# =============================================================================

def create_access_token(
    user_id: int,
    username: str,
    role: UserRole,
    expires_delta: Optional[timedelta] = None
) -> Tuple[str, datetime]:
    """
    Sign an access token for the given identity.

    Returns:
        (token, expires_at)
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=config.JWT_EXPIRATION_HOURS))

    payload = {
        "id": user_id,
        "username": username,
        "role": UserRole(role).value,
        "iat": now,
        "exp": expire,
    }
    token = jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)
    return token, expire


def decode_access_token(token: str) -> Optional[CurrentUser]:
    """
    Verify signature and expiry and decode the identity.

    Returns:
        CurrentUser if the token is valid, None otherwise (expired, tampered,
        malformed payload or unknown role).
    """
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM]
        )
        return CurrentUser(
            id=int(payload["id"]),
            username=payload["username"],
            role=UserRole(payload["role"]),
        )
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is a subclass
        return None
    except (KeyError, ValueError, TypeError):
        return None


def get_token_expiration_seconds() -> int:
    """Token lifetime in seconds, returned to clients as expires_in."""
    return config.JWT_EXPIRATION_HOURS * 3600
