"""
Email logging utilities - audit trail of every outbound send.
"""

from typing import Dict, Any, Optional, List

from .constants import EmailStatus


def _insert_log(db, recipient: str, subject: str, email_type: str, status: str,
                ticket_id: Optional[int] = None, error: Optional[str] = None) -> int:
    cursor = db.execute(
        """
        INSERT INTO email_log (ticket_id, recipient, subject, email_type, status, error)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (ticket_id, recipient, subject, email_type, status, error)
    )
    db.commit()
    return cursor.lastrowid


def log_email_sent(db, recipient: str, subject: str,
                   email_type: str, ticket_id: Optional[int] = None) -> int:
    """
    Record a delivered email.

    Returns:
        ID of the log row
    """
    return _insert_log(db, recipient, subject, email_type, EmailStatus.SENT, ticket_id)


def log_email_failed(db, recipient: str, subject: str,
                     email_type: str, error: str,
                     ticket_id: Optional[int] = None) -> int:
    """
    Record a failed email together with the transport error.

    Returns:
        ID of the log row
    """
    return _insert_log(db, recipient, subject, email_type, EmailStatus.FAILED, ticket_id, error)


def get_email_log(db, filters: Optional[Dict[str, Any]] = None,
                  limit: int = 100, offset: int = 0) -> List[Dict]:
    """
    Email log, newest first.

    Args:
        db: Database connection
        filters: Optional keys status, email_type, ticket_id
        limit: Maximum rows
        offset: Pagination offset
    """
    query = """
        SELECT l.*, t.title AS ticket_title
        FROM email_log l
        LEFT JOIN tickets t ON l.ticket_id = t.id
        WHERE 1=1
    """
    params = []

    if filters:
        if filters.get('status'):
            query += " AND l.status = ?"
            params.append(filters['status'])
        if filters.get('email_type'):
            query += " AND l.email_type = ?"
            params.append(filters['email_type'])
        if filters.get('ticket_id'):
            query += " AND l.ticket_id = ?"
            params.append(filters['ticket_id'])

    query += " ORDER BY l.created_at DESC, l.id DESC LIMIT ? OFFSET ?"
    params.extend([limit, offset])

    return db.execute(query, params).fetchall()
