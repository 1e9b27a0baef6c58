"""
Email transports.
"""

from .base import BaseEmailProvider
from .smtp import SmtpProvider

__all__ = ['BaseEmailProvider', 'SmtpProvider']
