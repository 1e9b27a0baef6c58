# =============================================================================
# ASSETDESK - AUTH ROUTER
# =============================================================================
# POST /login - username/password -> signed token + user identity
# =============================================================================

import logging
from typing import Dict, Any

from fastapi import APIRouter, Depends

from ..database import get_db
from ..exceptions import require_fields
from ..services.users import authenticate
from .models import LoginRequest
from .security import create_access_token, get_token_expiration_seconds

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Authentication"],
    responses={
        400: {"description": "Missing credentials"},
        401: {"description": "Invalid credentials"}
    }
)


@router.post("/login")
def login(request: LoginRequest, db=Depends(get_db)) -> Dict[str, Any]:
    """
    Authenticate with username and password.

    Returns the bearer token (accessToken), its lifetime in seconds and the
    public user object. Wrong username and wrong password are
    indistinguishable (401 "Invalid credentials").
    """
    require_fields(request.model_dump(), ['username', 'password'],
                   'Username and password are required.')

    user = authenticate(db, request.username, request.password)
    token, _ = create_access_token(user['id'], user['username'], user['role'])

    logger.info("User '%s' logged in", user['username'])
    return {
        "accessToken": token,
        "user": user,
        "expires_in": get_token_expiration_seconds(),
    }
