# =============================================================================
# ASSETDESK - EMAIL LOG ROUTER
# =============================================================================

from typing import Dict, Any, List, Optional

from fastapi import APIRouter, Depends, Query

from ..auth.dependencies import require_admin
from ..auth.models import CurrentUser
from ..database import get_db
from ..services.email import get_email_log

router = APIRouter(prefix="/email-log", tags=["Email"])


@router.get("")
def list_email_log(
    status_filter: Optional[str] = Query(None, alias="status"),
    email_type: Optional[str] = None,
    ticket_id: Optional[int] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> List[Dict[str, Any]]:
    """Latest outbound email attempts, newest first (admin)."""
    filters = {'status': status_filter, 'email_type': email_type, 'ticket_id': ticket_id}
    return get_email_log(db, filters, limit=limit, offset=offset)
