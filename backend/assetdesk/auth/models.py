# =============================================================================
# ASSETDESK - AUTH MODELS
# =============================================================================
# Pydantic models for login and the authenticated identity.
# =============================================================================

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class UserRole(str, Enum):
    """
    Closed set of roles.

    The string value is what is stored in users.role and carried in tokens.
    """
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def values(cls):
        return [r.value for r in cls]


class LoginRequest(BaseModel):
    """Body of POST /login. Presence is checked by the route (400, not 422)."""
    username: Optional[str] = None
    password: Optional[str] = None


class CurrentUser(BaseModel):
    """
    Identity decoded from a valid token and attached to the request.

    Same shape as the "user" object returned by login.
    """
    id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
