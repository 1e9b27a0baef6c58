"""
Users - login lookup and admin management.
"""

import logging
from typing import Dict, Any, List

from ..auth.models import UserRole
from ..auth.security import hash_password, verify_password
from ..database import is_row_id
from ..exceptions import (
    ConflictError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
    require_fields,
)

logger = logging.getLogger(__name__)


def authenticate(db, username: str, password: str) -> Dict[str, Any]:
    """
    Check credentials and return the public user row.

    Raises:
        InvalidCredentialsError: unknown username or wrong password
    """
    row = db.execute(
        "SELECT id, username, password, role FROM users WHERE username = ?",
        (username,)
    ).fetchone()

    if not row or not verify_password(password, row['password']):
        logger.info("Failed login for '%s'", username)
        raise InvalidCredentialsError()

    return {'id': row['id'], 'username': row['username'], 'role': row['role']}


def list_users(db) -> List[Dict[str, Any]]:
    return db.execute(
        "SELECT id, username, role FROM users ORDER BY username ASC"
    ).fetchall()


def create_user(db, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Register a user.

    Args:
        data: username, password, role (admin|user)

    Raises:
        ValidationError: missing field or unknown role
        ConflictError: username taken
    """
    require_fields(data, ['username', 'password', 'role'],
                   'Username, password, and role are required')

    if data['role'] not in UserRole.values():
        raise ValidationError(f"Invalid role. Allowed: {', '.join(UserRole.values())}")

    username = data['username'].strip()
    try:
        cursor = db.execute(
            "INSERT INTO users (username, password, role) VALUES (?, ?, ?)",
            (username, hash_password(data['password']), data['role'])
        )
        db.commit()
    except ConflictError:
        raise ConflictError('Username already exists.')

    logger.info("User '%s' created with role %s", username, data['role'])
    return {'id': cursor.lastrowid, 'username': username, 'role': data['role']}


def delete_user(db, user_id: int, current_user_id: int) -> None:
    """
    Hard-delete a user.

    Raises:
        ValidationError: attempt to delete the calling user
        UserNotFoundError: no such user
    """
    if user_id == current_user_id:
        raise ValidationError('Cannot delete the currently logged-in user.')
    if not is_row_id(user_id):
        raise UserNotFoundError()

    cursor = db.execute("DELETE FROM users WHERE id = ?", (user_id,))
    if cursor.rowcount == 0:
        db.rollback()
        raise UserNotFoundError()
    db.commit()
    logger.info("User %s deleted", user_id)
