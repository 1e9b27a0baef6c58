"""
Asset queries - read operations.
"""

from typing import List, Dict, Any, Optional, Sequence

from ...database import is_row_id


def get_asset(db, asset_id: int) -> Optional[Dict[str, Any]]:
    if not is_row_id(asset_id):
        return None
    return db.execute("SELECT * FROM assets WHERE id = ?", (asset_id,)).fetchone()


def get_company_assets(db, company_id: int) -> List[Dict[str, Any]]:
    """Assets of one company, alphabetical by name."""
    if not is_row_id(company_id):
        return []
    return db.execute(
        "SELECT * FROM assets WHERE company_id = ? ORDER BY asset_name ASC, id ASC",
        (company_id,)
    ).fetchall()


def get_assets_by_ids(db, asset_ids: Sequence[int]) -> List[Dict[str, Any]]:
    if not asset_ids:
        return []
    placeholders = ', '.join('?' for _ in asset_ids)
    return db.execute(
        f"SELECT * FROM assets WHERE id IN ({placeholders}) ORDER BY id ASC",
        list(asset_ids)
    ).fetchall()


def get_ticket_assets(db, ticket_id: int) -> List[Dict[str, Any]]:
    """Assets linked to a ticket."""
    return db.execute(
        """
        SELECT a.* FROM assets a
        JOIN ticket_assets ta ON a.id = ta.asset_id
        WHERE ta.ticket_id = ?
        ORDER BY a.id ASC
        """,
        (ticket_id,)
    ).fetchall()
