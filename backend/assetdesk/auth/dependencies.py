# =============================================================================
# ASSETDESK - AUTH DEPENDENCIES
# =============================================================================
# FastAPI dependencies guarding the routes.
#
# - get_current_user: no header -> 401, invalid/expired token -> 403
# - require_admin:    composes with get_current_user, non-admin -> 403
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..exceptions import UnauthorizedError, TokenInvalidError, InsufficientRoleError
from .models import CurrentUser, UserRole
from .security import decode_access_token

logger = logging.getLogger(__name__)

# Extracts "Authorization: Bearer <token>"; errors are raised by us
security_scheme = HTTPBearer(
    scheme_name="JWT",
    description="Token returned by POST /api/login",
    auto_error=False
)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme)
) -> CurrentUser:
    """
    Identity of the caller.

    Raises:
        UnauthorizedError: no bearer credential
        TokenInvalidError: bad signature, expired or malformed token (403)
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    user = decode_access_token(credentials.credentials)
    if user is None:
        logger.info("Rejected invalid or expired token")
        raise TokenInvalidError()
    return user


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user)
) -> CurrentUser:
    """Caller identity, only when it holds the admin role."""
    if current_user.role != UserRole.ADMIN:
        raise InsufficientRoleError()
    return current_user
