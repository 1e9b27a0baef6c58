"""
Ticket commands - write operations of the ticket workflow.

Multi-statement writes run inside db.transaction(); notifications go out
only after the commit.
"""

import logging
from typing import Dict, Any

from ...database import is_row_id
from ...exceptions import (
    ConflictError,
    PersistenceError,
    TicketNotFoundError,
    ValidationError,
    require_fields,
)
from ..constants import TicketStatus, TicketPriority
from ..notifications import notify_ticket_received, notify_ticket_changes, notify_new_reply
from .queries import get_ticket, get_update

logger = logging.getLogger(__name__)


def _distinct_ids(values) -> list:
    seen = []
    for value in values or []:
        if value not in seen:
            seen.append(value)
    return seen


def insert_ticket(db, company_id: int, user_id: int, title: str, description: str,
                  priority: str = TicketPriority.DEFAULT,
                  customer_email: str = None) -> int:
    """Insert a ticket row inside the caller's transaction. Returns the new id."""
    cursor = db.execute(
        """
        INSERT INTO tickets
        (company_id, user_id, title, description, priority, status, customer_email)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (company_id, user_id, title, description, priority, TicketStatus.OPEN, customer_email)
    )
    return cursor.lastrowid


def insert_update(db, ticket_id: int, user_id: int, update_text: str, status: str = None) -> int:
    """
    Append an update and bump the ticket's updated_at, inside the caller's
    transaction. When status is given the ticket moves to it as well.
    """
    cursor = db.execute(
        "INSERT INTO ticket_updates (ticket_id, user_id, update_text) VALUES (?, ?, ?)",
        (ticket_id, user_id, update_text)
    )
    if status:
        db.execute(
            "UPDATE tickets SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (status, ticket_id)
        )
    else:
        db.execute(
            "UPDATE tickets SET updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (ticket_id,)
        )
    return cursor.lastrowid


def create_ticket(db, data: Dict[str, Any], user_id: int) -> Dict[str, Any]:
    """
    Open a ticket and link its assets.

    Args:
        db: Database connection
        data: Dict with:
            - company_id (required)
            - title (required)
            - description (required)
            - priority (optional, default 'Normal')
            - asset_ids (optional) - repeated ids are linked once
            - customer_email (optional) - receives the acknowledgement
        user_id: Creator

    Returns:
        Joined ticket (company_name, user_name, assigned_user_name)

    Raises:
        ValidationError: missing field or unknown priority
        PersistenceError: any store failure; nothing is written
    """
    require_fields(data, ['company_id', 'title', 'description'],
                   'Company, title, and description are required.')

    priority = data.get('priority') or TicketPriority.DEFAULT
    if priority not in TicketPriority.ALL:
        raise ValidationError(f"Invalid priority. Allowed: {', '.join(TicketPriority.ALL)}")

    customer_email = (data.get('customer_email') or '').strip() or None

    try:
        with db.transaction():
            ticket_id = insert_ticket(
                db, data['company_id'], user_id, data['title'], data['description'],
                priority, customer_email
            )
            for asset_id in _distinct_ids(data.get('asset_ids')):
                db.execute(
                    "INSERT INTO ticket_assets (ticket_id, asset_id) VALUES (?, ?)",
                    (ticket_id, asset_id)
                )
    except ConflictError as e:
        raise PersistenceError() from e

    logger.info("Ticket #%s created by user %s", ticket_id, user_id)

    ticket = get_ticket(db, ticket_id)
    notify_ticket_received(db, ticket)
    return ticket


def update_ticket(db, ticket_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Set status, priority and assignee, then notify each change.

    An empty or absent assigned_user_id clears the assignment.

    Returns:
        The persisted joined ticket
    """
    current = get_ticket(db, ticket_id)
    if not current:
        raise TicketNotFoundError()

    status = data.get('status')
    priority = data.get('priority')
    if status not in TicketStatus.ALL:
        raise ValidationError(f"Invalid status. Allowed: {', '.join(TicketStatus.ALL)}")
    if priority not in TicketPriority.ALL:
        raise ValidationError(f"Invalid priority. Allowed: {', '.join(TicketPriority.ALL)}")

    assigned_user_id = data.get('assigned_user_id') or None

    db.execute(
        """
        UPDATE tickets
        SET status = ?, priority = ?, assigned_user_id = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
        """,
        (status, priority, assigned_user_id, ticket_id)
    )
    db.commit()

    updated = get_ticket(db, ticket_id)
    notify_ticket_changes(db, current, updated)
    return updated


def add_update(db, ticket_id: int, update_text: str, user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Post a reply; the ticket moves to 'In Progress'.

    Args:
        user: Acting identity with 'id' and 'username'

    Returns:
        Update row with user_name and the resulting ticket_status
    """
    if not update_text or not update_text.strip():
        raise ValidationError('Update text cannot be empty.')

    ticket = get_ticket(db, ticket_id)
    if not ticket:
        raise TicketNotFoundError()

    with db.transaction():
        update_id = insert_update(db, ticket_id, user['id'], update_text, TicketStatus.ON_REPLY)

    notify_new_reply(db, ticket, user['username'], update_text)

    update = get_update(db, update_id)
    update['ticket_status'] = TicketStatus.ON_REPLY
    return update


def delete_ticket(db, ticket_id: int) -> None:
    if not is_row_id(ticket_id):
        raise TicketNotFoundError()
    cursor = db.execute("DELETE FROM tickets WHERE id = ?", (ticket_id,))
    if cursor.rowcount == 0:
        db.rollback()
        raise TicketNotFoundError()
    db.commit()
    logger.info("Ticket #%s deleted", ticket_id)
