#!/usr/bin/env python3
# =============================================================================
# ASSETDESK - CREATE ADMIN SCRIPT
# =============================================================================
# Creates an admin user; the schema is created first when missing.
#
# USAGE:
#   python -m assetdesk.scripts.create_admin --username admin --password MySecurePass123
#   ADMIN_PASSWORD=... python -m assetdesk.scripts.create_admin
# =============================================================================

import argparse
import sys

from ..config import config
from ..database import connection, init_database
from ..exceptions import AssetDeskException
from ..services.users import create_user


def create_initial_admin(username: str, password: str) -> bool:
    """
    Create an admin user.

    Returns:
        True when created, False when the username is taken or invalid
    """
    init_database()

    with connection() as db:
        try:
            user = create_user(db, {'username': username, 'password': password, 'role': 'admin'})
        except AssetDeskException as e:
            print(f"Error: {e.detail}")
            return False

    print("=" * 60)
    print("ADMIN CREATED")
    print("=" * 60)
    print(f"   ID:       {user['id']}")
    print(f"   Username: {user['username']}")
    print("=" * 60)
    return True


def main():
    """Command line entry point."""
    parser = argparse.ArgumentParser(
        description="Create an AssetDesk admin user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m assetdesk.scripts.create_admin --password SecurePass123
  python -m assetdesk.scripts.create_admin --username myadmin --password SecurePass123
        """
    )
    parser.add_argument(
        "--username",
        default=config.ADMIN_USERNAME or "admin",
        help="Admin username (default: ADMIN_USERNAME or 'admin')"
    )
    parser.add_argument(
        "--password",
        default=config.ADMIN_PASSWORD or None,
        help="Admin password (default: ADMIN_PASSWORD)"
    )

    args = parser.parse_args()

    if not config.DATABASE_URL:
        print("Error: DATABASE_URL is not set")
        sys.exit(1)

    if not args.password or len(args.password) < 8:
        print("Error: a password of at least 8 characters is required")
        sys.exit(1)

    if len(args.username) < 3:
        print("Error: the username must be at least 3 characters")
        sys.exit(1)

    try:
        success = create_initial_admin(args.username, args.password)
    except AssetDeskException as e:
        print(f"Error while creating the admin: {e.detail}")
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
