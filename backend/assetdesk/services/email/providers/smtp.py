"""
SMTP provider - implicit TLS (port 465) or STARTTLS, with a connect timeout.

Defaults target the SendGrid relay: user 'apikey', password = API key.
"""

import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid
from typing import Dict, Any

from .base import BaseEmailProvider
from ....config import config

_TAG_RE = re.compile(r'<[^>]+>')


def settings_from_config() -> Dict[str, Any]:
    """Provider settings taken from the application config."""
    return {
        'host': config.SMTP_HOST,
        'port': config.SMTP_PORT,
        'user': config.SMTP_USER,
        'password': config.SMTP_PASSWORD,
        'use_ssl': config.SMTP_USE_SSL,
        'timeout': config.SMTP_TIMEOUT,
        'sender': config.MAIL_FROM,
    }


class SmtpProvider(BaseEmailProvider):
    """Provider for any authenticated SMTP relay"""

    def _validate_settings(self) -> None:
        if not self.settings.get('host'):
            raise ValueError("SMTP_HOST is not configured")
        if not self.settings.get('password'):
            raise ValueError("SMTP_PASSWORD is not configured")

    def connect(self) -> smtplib.SMTP:
        host = self.settings['host']
        port = int(self.settings.get('port', 465))
        timeout = self.settings.get('timeout', 30)
        use_ssl = self.settings.get('use_ssl', True)

        if use_ssl:
            server = smtplib.SMTP_SSL(host, port, timeout=timeout)
        else:
            server = smtplib.SMTP(host, port, timeout=timeout)

        try:
            if not use_ssl:
                server.starttls()
            server.login(self.settings.get('user', ''), self.settings['password'])
        except Exception:
            server.close()
            raise
        return server

    def build_message(self, to: str, subject: str, body_html: str) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['From'] = self.settings.get('sender', '')
        msg['To'] = to
        msg['Subject'] = subject
        msg['Date'] = formatdate(localtime=True)
        msg['Message-ID'] = make_msgid()

        body_text = _TAG_RE.sub('', body_html)
        msg.attach(MIMEText(body_text, 'plain', 'utf-8'))
        msg.attach(MIMEText(body_html, 'html', 'utf-8'))
        return msg

    def send_email(self, to: str, subject: str, body_html: str) -> None:
        msg = self.build_message(to, subject, body_html)
        server = self.connect()
        try:
            server.send_message(msg)
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:
                pass
