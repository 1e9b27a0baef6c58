"""
Inbound email webhook - turns a parsed email into a ticket reply or a new
ticket.

A subject carrying "[Ticket #<id>]" is a reply to that ticket; anything else
opens a new ticket for the company whose contact_email matches the sender.
"""

import logging
import re
from typing import Dict, Any, Optional

from ...config import config
from ...database import is_row_id
from ...exceptions import TicketNotFoundError, ValidationError
from ..companies import find_company_by_contact_email
from ..constants import TicketPriority
from .commands import insert_ticket, insert_update

logger = logging.getLogger(__name__)

TICKET_TAG_RE = re.compile(r'\[Ticket #(\d+)\]')

ACTION_REPLY = 'update_added'
ACTION_NEW = 'ticket_created'


def extract_ticket_id(subject: str) -> Optional[int]:
    """Ticket id from a '[Ticket #N]' subject tag, or None."""
    match = TICKET_TAG_RE.search(subject or '')
    return int(match.group(1)) if match else None


def process_inbound_email(db, sender: Optional[str], subject: Optional[str],
                          text: Optional[str]) -> Dict[str, Any]:
    """
    Ingest one parsed inbound email.

    Args:
        sender: 'from' address
        subject: Subject line
        text: Plain text body

    Returns:
        {message, ticket_id, action}

    Raises:
        ValidationError: a field is missing
        TicketNotFoundError: tagged ticket does not exist (nothing written)
    """
    if not sender or not subject or not text:
        raise ValidationError('Missing required email fields.')

    ticket_id = extract_ticket_id(subject)

    if ticket_id is not None:
        ticket = None
        if is_row_id(ticket_id):
            ticket = db.execute(
                "SELECT id, user_id FROM tickets WHERE id = ?", (ticket_id,)
            ).fetchone()
        if not ticket:
            logger.warning("Inbound reply from %s for unknown ticket #%s", sender, ticket_id)
            raise TicketNotFoundError(f'Ticket #{ticket_id} not found.')

        with db.transaction():
            insert_update(db, ticket_id, ticket['user_id'], text)

        logger.info("Inbound reply from %s added to ticket #%s", sender, ticket_id)
        return {
            'message': f'Update added to ticket #{ticket_id}.',
            'ticket_id': ticket_id,
            'action': ACTION_REPLY,
        }

    company = find_company_by_contact_email(db, sender)
    if company:
        company_id = company['id']
    else:
        company_id = config.FALLBACK_COMPANY_ID
        logger.info("No company for %s, using fallback company %s", sender, company_id)

    with db.transaction():
        new_id = insert_ticket(
            db, company_id, config.SYSTEM_USER_ID, subject, text,
            TicketPriority.DEFAULT, sender
        )

    logger.info("Inbound email from %s opened ticket #%s", sender, new_id)
    return {
        'message': f'New ticket #{new_id} created from email.',
        'ticket_id': new_id,
        'action': ACTION_NEW,
    }
