# =============================================================================
# ASSETDESK - USERS ROUTER
# =============================================================================
# Admin-only user management.
# =============================================================================

from typing import Dict, Any, List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from ..auth.dependencies import require_admin
from ..auth.models import CurrentUser
from ..database import get_db
from ..services.users import list_users, create_user, delete_user

router = APIRouter(prefix="/users", tags=["Users"])


class CreateUserRequest(BaseModel):
    """Request body for a new user"""
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


@router.get("")
def get_users(
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> List[Dict[str, Any]]:
    """All users (id, username, role)."""
    return list_users(db)


@router.post("", status_code=status.HTTP_201_CREATED)
def post_user(
    request: CreateUserRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> Dict[str, Any]:
    return create_user(db, request.model_dump())


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(
    user_id: int,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> Response:
    """Delete a user. Admins cannot delete themselves."""
    delete_user(db, user_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
