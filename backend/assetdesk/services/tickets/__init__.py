"""
Tickets - queries, workflow commands and the inbound email webhook.
"""

from .queries import get_tickets, get_ticket, get_ticket_detail, get_ticket_updates, get_update
from .commands import create_ticket, update_ticket, add_update, delete_ticket
from .webhook import process_inbound_email, extract_ticket_id

__all__ = [
    # Queries
    'get_tickets',
    'get_ticket',
    'get_ticket_detail',
    'get_ticket_updates',
    'get_update',
    # Commands
    'create_ticket',
    'update_ticket',
    'add_update',
    'delete_ticket',
    # Webhook
    'process_inbound_email',
    'extract_ticket_id',
]
