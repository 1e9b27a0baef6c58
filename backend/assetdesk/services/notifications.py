"""
Ticket notifications - automatic emails for ticket events.

Every function runs after the triggering transaction has committed and
never raises: a delivery failure is logged and recorded in email_log.
"""

import logging
from typing import Dict, Any, List

from .email import EmailSender
from .email.constants import EmailType

logger = logging.getLogger(__name__)

UNASSIGNED_LABEL = 'our team'


def _send(db, template: str, ticket: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
    recipient = ticket.get('customer_email')
    if not recipient:
        return {'success': False, 'skipped': True}

    base = {'id': ticket['id'], 'title': ticket.get('title', '')}
    base.update(context)

    try:
        return EmailSender(db).send_from_template(template, base, recipient, ticket_id=ticket['id'])
    except Exception as e:
        logger.exception("Notification '%s' for ticket #%s failed", template, ticket['id'])
        return {'success': False, 'error': str(e)}


def notify_ticket_received(db, ticket: Dict[str, Any]) -> Dict[str, Any]:
    """Acknowledge a new ticket to its customer."""
    return _send(db, EmailType.TICKET_RECEIVED, ticket, {
        'priority': ticket.get('priority'),
        'description': ticket.get('description'),
    })


def notify_ticket_changes(db, old: Dict[str, Any], new: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    One email per changed attribute: status, priority, assignee.

    Args:
        old: Ticket before the update
        new: Joined ticket after the update (assigned_user_name available)

    Returns:
        Results of the sends attempted, in that order
    """
    results = []

    if old['status'] != new['status']:
        results.append(_send(db, EmailType.STATUS_CHANGED, new, {
            'old_value': old['status'],
            'new_value': new['status'],
        }))

    if old['priority'] != new['priority']:
        results.append(_send(db, EmailType.PRIORITY_CHANGED, new, {
            'old_value': old['priority'],
            'new_value': new['priority'],
        }))

    if old.get('assigned_user_id') != new.get('assigned_user_id'):
        results.append(_send(db, EmailType.TICKET_ASSIGNED, new, {
            'assignee': new.get('assigned_user_name') or UNASSIGNED_LABEL,
        }))

    return results


def notify_new_reply(db, ticket: Dict[str, Any], author: str, update_text: str) -> Dict[str, Any]:
    """Forward a staff reply to the customer."""
    return _send(db, EmailType.NEW_REPLY, ticket, {
        'author': author,
        'update_text': update_text,
    })
