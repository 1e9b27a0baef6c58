# =============================================================================
# ASSETDESK - TICKETS ROUTER
# =============================================================================
# Ticket lifecycle endpoints and the inbound email webhook.
#
# The webhook is unauthenticated and is declared before /tickets/{ticket_id}
# so the literal path wins.
# =============================================================================

import logging
from typing import Dict, Any, List, Optional

from fastapi import APIRouter, Depends, Form, Query, Response, status
from pydantic import BaseModel

from ..auth.dependencies import get_current_user, require_admin
from ..auth.models import CurrentUser
from ..database import get_db
from ..exceptions import TicketNotFoundError
from ..services.tickets import (
    add_update,
    create_ticket,
    delete_ticket,
    get_ticket_detail,
    get_tickets,
    process_inbound_email,
    update_ticket,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets", tags=["Tickets"])


# =============================================================================
# REQUEST MODELS
# =============================================================================

class CreateTicketRequest(BaseModel):
    """New ticket"""
    company_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    asset_ids: Optional[List[int]] = None
    customer_email: Optional[str] = None


class UpdateTicketRequest(BaseModel):
    """Admin change of status, priority and assignee"""
    status: Optional[str] = None
    priority: Optional[str] = None
    assigned_user_id: Optional[int] = None


class AddUpdateRequest(BaseModel):
    update_text: Optional[str] = None


# =============================================================================
# WEBHOOK
# =============================================================================

@router.post("/email-webhook")
def email_webhook(
    sender: Optional[str] = Form(None, alias="from"),
    subject: Optional[str] = Form(None),
    text: Optional[str] = Form(None),
    plain: Optional[str] = Form(None),
    db=Depends(get_db)
) -> Dict[str, Any]:
    """
    Inbound parse webhook of the email provider.

    A subject tagged "[Ticket #N]" appends an update to ticket N; any other
    email opens a new ticket.
    """
    logger.info("Inbound email from %s: %s", sender, subject)
    return process_inbound_email(db, sender, subject, text or plain)


# =============================================================================
# TICKETS
# =============================================================================

@router.get("")
def list_tickets(
    status_filter: Optional[str] = Query(None, alias="status"),
    company_id: Optional[int] = None,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> List[Dict[str, Any]]:
    """Tickets, most recently updated first."""
    return get_tickets(db, {'status': status_filter, 'company_id': company_id})


@router.post("", status_code=status.HTTP_201_CREATED)
def post_ticket(
    request: CreateTicketRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Dict[str, Any]:
    return create_ticket(db, request.model_dump(), current_user.id)


@router.get("/{ticket_id}")
def get_ticket_by_id(
    ticket_id: int,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Dict[str, Any]:
    """Ticket with its updates (oldest first) and linked assets."""
    ticket = get_ticket_detail(db, ticket_id)
    if not ticket:
        raise TicketNotFoundError()
    return ticket


@router.put("/{ticket_id}")
def put_ticket(
    ticket_id: int,
    request: UpdateTicketRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> Dict[str, Any]:
    return update_ticket(db, ticket_id, request.model_dump())


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_ticket(
    ticket_id: int,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> Response:
    delete_ticket(db, ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{ticket_id}/updates", status_code=status.HTTP_201_CREATED)
def post_ticket_update(
    ticket_id: int,
    request: AddUpdateRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Dict[str, Any]:
    """Reply to a ticket; the ticket moves to 'In Progress'."""
    return add_update(
        db, ticket_id, request.update_text,
        {'id': current_user.id, 'username': current_user.username}
    )
