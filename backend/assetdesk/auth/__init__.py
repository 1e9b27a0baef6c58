"""
Authentication: token issue/verification and route guards.
"""

from .dependencies import get_current_user, require_admin
from .models import CurrentUser, UserRole

__all__ = ['get_current_user', 'require_admin', 'CurrentUser', 'UserRole']
