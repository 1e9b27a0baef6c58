"""
Base class for outbound email providers.

To add a provider (e.g. an HTTP API instead of SMTP):
1. Create a module in providers/
2. Extend BaseEmailProvider
3. Implement send_email
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class BaseEmailProvider(ABC):
    """Common interface for outbound email transports."""

    def __init__(self, settings: Dict[str, Any]):
        """
        Args:
            settings: Transport settings and credentials
        """
        self.settings = settings
        self._validate_settings()

    @abstractmethod
    def _validate_settings(self) -> None:
        """Raise ValueError when the settings cannot work."""

    @abstractmethod
    def send_email(self, to: str, subject: str, body_html: str) -> None:
        """
        Deliver one message.

        Raises:
            Any transport error; callers decide how to isolate it.
        """
