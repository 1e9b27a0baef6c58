"""
API routers, mounted under /api by main.py.
"""

from . import assets, companies, email_log, tickets, users

__all__ = ['assets', 'companies', 'email_log', 'tickets', 'users']
