"""
Companies (CRM) - queries and commands.
"""

import logging
from email.utils import parseaddr
from typing import Dict, Any, List, Optional

from ..database import is_row_id
from ..exceptions import CompanyNotFoundError, ConflictError, require_fields
from .constants import COMPANY_FIELDS

logger = logging.getLogger(__name__)

_DUPLICATE_NAME = 'A company with this name already exists.'


def list_companies(db) -> List[Dict[str, Any]]:
    return db.execute("SELECT * FROM companies ORDER BY name ASC").fetchall()


def get_company(db, company_id: int) -> Optional[Dict[str, Any]]:
    if not is_row_id(company_id):
        return None
    return db.execute(
        "SELECT * FROM companies WHERE id = ?", (company_id,)
    ).fetchone()


def find_company_by_contact_email(db, email: str) -> Optional[Dict[str, Any]]:
    """
    Company whose registered contact email matches (case-insensitive).

    Accepts a bare address or a display form such as "Jane Doe <it@acme.test>".
    """
    address = parseaddr(email)[1] or email.strip()
    return db.execute(
        "SELECT * FROM companies WHERE LOWER(contact_email) = LOWER(?) ORDER BY id LIMIT 1",
        (address,)
    ).fetchone()


def create_company(db, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert a company. Only name is required.

    Raises:
        ValidationError: name missing
        ConflictError: name taken
    """
    require_fields(data, ['name'], 'Company name is required')

    values = [data.get(f) for f in COMPANY_FIELDS]
    values[0] = values[0].strip()
    try:
        cursor = db.execute(
            f"INSERT INTO companies ({', '.join(COMPANY_FIELDS)}) "
            f"VALUES ({', '.join('?' for _ in COMPANY_FIELDS)})",
            values
        )
        db.commit()
    except ConflictError:
        raise ConflictError(_DUPLICATE_NAME)

    logger.info("Company '%s' created", values[0])
    return get_company(db, cursor.lastrowid)


def update_company(db, company_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Full replace of the mutable company fields.

    Raises:
        ValidationError, CompanyNotFoundError, ConflictError
    """
    require_fields(data, ['name'], 'Company name is required')

    if not get_company(db, company_id):
        raise CompanyNotFoundError()

    assignments = ', '.join(f"{f} = ?" for f in COMPANY_FIELDS)
    values = [data.get(f) for f in COMPANY_FIELDS]
    values[0] = values[0].strip()
    try:
        db.execute(f"UPDATE companies SET {assignments} WHERE id = ?", values + [company_id])
        db.commit()
    except ConflictError:
        raise ConflictError(_DUPLICATE_NAME)

    return get_company(db, company_id)


def delete_company(db, company_id: int) -> None:
    """Hard delete; assets and tickets go with it (ON DELETE CASCADE)."""
    if not is_row_id(company_id):
        raise CompanyNotFoundError()
    cursor = db.execute("DELETE FROM companies WHERE id = ?", (company_id,))
    if cursor.rowcount == 0:
        db.rollback()
        raise CompanyNotFoundError()
    db.commit()
    logger.info("Company %s deleted", company_id)
