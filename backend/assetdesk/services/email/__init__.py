"""
Outbound email: templates, SMTP transport, sender and audit log.
"""

from .constants import EmailStatus, EmailType
from .templates import render_template, TEMPLATES
from .sender import EmailSender
from .log import log_email_sent, log_email_failed, get_email_log

__all__ = [
    'EmailStatus',
    'EmailType',
    'render_template',
    'TEMPLATES',
    'EmailSender',
    'log_email_sent',
    'log_email_failed',
    'get_email_log',
]
