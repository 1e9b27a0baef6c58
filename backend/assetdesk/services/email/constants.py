"""
Email constants
"""


class EmailStatus:
    """Outcome of a send attempt"""
    SENT = 'sent'
    FAILED = 'failed'

    ALL = [SENT, FAILED]


class EmailType:
    """Template / log type of an outbound email"""
    TICKET_RECEIVED = 'ticket_received'
    STATUS_CHANGED = 'status_changed'
    PRIORITY_CHANGED = 'priority_changed'
    TICKET_ASSIGNED = 'ticket_assigned'
    NEW_REPLY = 'new_reply'

    ALL = [TICKET_RECEIVED, STATUS_CHANGED, PRIORITY_CHANGED, TICKET_ASSIGNED, NEW_REPLY]
