"""
Email sender - delivery with automatic audit logging.
"""

import logging
from typing import Dict, Any, Optional

from ...exceptions import AssetDeskException
from .providers.smtp import SmtpProvider, settings_from_config
from .templates import render_template
from .log import log_email_sent, log_email_failed

logger = logging.getLogger(__name__)


class EmailSender:
    """
    Outbound email with automatic logging. Never raises: a failed send is
    logged and reported in the result dict.

    Usage:
        sender = EmailSender(db)
        result = sender.send(to, subject, body_html)
        # or
        result = sender.send_from_template('ticket_received', context, to, ticket_id)
    """

    def __init__(self, db):
        """
        Args:
            db: Database connection used for the email log
        """
        self.db = db
        self._provider = None

    @property
    def provider(self):
        """Lazily built provider from the application config"""
        if self._provider is None:
            self._provider = SmtpProvider(settings_from_config())
        return self._provider

    def _log(self, log_fn, **kwargs) -> Optional[int]:
        try:
            return log_fn(self.db, **kwargs)
        except AssetDeskException:
            logger.exception("Could not write email log for %s", kwargs.get('recipient'))
            return None

    def send(self, to: str, subject: str, body_html: str,
             ticket_id: Optional[int] = None,
             email_type: str = 'generic') -> Dict[str, Any]:
        """
        Send one email and log the outcome.

        Returns:
            Dict with 'success', 'log_id' and, on failure, 'error'
        """
        try:
            self.provider.send_email(to, subject, body_html)
        except Exception as e:
            logger.exception("Email '%s' to %s failed", subject, to)
            log_id = self._log(
                log_email_failed,
                recipient=to,
                subject=subject,
                email_type=email_type,
                ticket_id=ticket_id,
                error=str(e)
            )
            return {'success': False, 'log_id': log_id, 'error': str(e)}

        logger.info("Email '%s' sent to %s", subject, to)
        log_id = self._log(
            log_email_sent,
            recipient=to,
            subject=subject,
            email_type=email_type,
            ticket_id=ticket_id
        )
        return {'success': True, 'log_id': log_id}

    def send_from_template(self, template_name: str,
                           context: Dict[str, Any],
                           to: str,
                           ticket_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Send an email rendered from a predefined template.

        Args:
            template_name: Template name (see EmailType)
            context: Placeholder values
            to: Recipient
            ticket_id: Related ticket
        """
        try:
            subject, body = render_template(template_name, context)
        except ValueError as e:
            logger.error("Email template error: %s", e)
            return {'success': False, 'error': str(e)}
        return self.send(to, subject, body, ticket_id, template_name)
