"""
Ticket queries - read operations.
"""

from typing import Dict, Any, Optional, List

from ...database import is_row_id
from ..assets.queries import get_ticket_assets

# Ticket joined with the display names the client shows
_TICKET_SELECT = """
    SELECT
        t.*,
        c.name AS company_name,
        u.username AS user_name,
        au.username AS assigned_user_name
    FROM tickets t
    LEFT JOIN companies c ON t.company_id = c.id
    LEFT JOIN users u ON t.user_id = u.id
    LEFT JOIN users au ON t.assigned_user_id = au.id
"""


def get_tickets(db, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Ticket list, most recently updated first.

    Args:
        db: Database connection
        filters: Optional keys status, company_id
    """
    query = _TICKET_SELECT + " WHERE 1=1"
    params = []

    if filters:
        if filters.get('status'):
            query += " AND t.status = ?"
            params.append(filters['status'])
        if filters.get('company_id'):
            query += " AND t.company_id = ?"
            params.append(filters['company_id'])

    query += " ORDER BY t.updated_at DESC, t.id DESC"
    return db.execute(query, params).fetchall()


def get_ticket(db, ticket_id: int) -> Optional[Dict[str, Any]]:
    """Single ticket with company_name, user_name, assigned_user_name."""
    if not is_row_id(ticket_id):
        return None
    return db.execute(_TICKET_SELECT + " WHERE t.id = ?", (ticket_id,)).fetchone()


def get_ticket_updates(db, ticket_id: int) -> List[Dict[str, Any]]:
    """Conversation history, oldest first."""
    return db.execute(
        """
        SELECT tu.*, u.username AS user_name
        FROM ticket_updates tu
        LEFT JOIN users u ON tu.user_id = u.id
        WHERE tu.ticket_id = ?
        ORDER BY tu.created_at ASC, tu.id ASC
        """,
        (ticket_id,)
    ).fetchall()


def get_update(db, update_id: int) -> Optional[Dict[str, Any]]:
    return db.execute(
        """
        SELECT tu.*, u.username AS user_name
        FROM ticket_updates tu
        LEFT JOIN users u ON tu.user_id = u.id
        WHERE tu.id = ?
        """,
        (update_id,)
    ).fetchone()


def get_ticket_detail(db, ticket_id: int) -> Optional[Dict[str, Any]]:
    """
    Ticket with its updates and linked assets.

    Returns:
        Ticket dict with 'updates' and 'assets' lists, or None
    """
    ticket = get_ticket(db, ticket_id)
    if not ticket:
        return None

    ticket['updates'] = get_ticket_updates(db, ticket_id)
    ticket['assets'] = get_ticket_assets(db, ticket_id)
    return ticket
