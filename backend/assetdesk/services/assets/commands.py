"""
Asset commands - write operations, including the bulk import.

Bulk import is all-or-nothing: every row is validated before the first
insert and all inserts share one transaction.
"""

import logging
from typing import Dict, Any, List

from ...database import is_row_id
from ...exceptions import (
    AssetNotFoundError,
    CompanyNotFoundError,
    ConflictError,
    ValidationError,
)
from ..constants import AssetStatus, ASSET_FIELDS
from .queries import get_asset, get_assets_by_ids

logger = logging.getLogger(__name__)

_DUPLICATE_SERIAL = 'An asset with this serial number already exists.'

_INSERT_SQL = (
    f"INSERT INTO assets (company_id, {', '.join(ASSET_FIELDS)}) "
    f"VALUES (?, {', '.join('?' for _ in ASSET_FIELDS)})"
)


def _normalize_value(value):
    """Strip strings, turn blanks into NULL, stringify spreadsheet numbers."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def clean_asset_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize the mutable asset fields of a payload.

    Raises:
        ValidationError: asset_name missing or unknown status
    """
    fields = {f: _normalize_value(data.get(f)) for f in ASSET_FIELDS}

    if not fields['asset_name']:
        raise ValidationError('Device name is required.')

    if fields['status'] is None:
        fields['status'] = AssetStatus.DEFAULT
    elif fields['status'] not in AssetStatus.ALL:
        raise ValidationError(f"Invalid status. Allowed: {', '.join(AssetStatus.ALL)}")

    return fields


def _require_company(db, company_id) -> None:
    if not company_id:
        raise ValidationError('Company ID and Device Name are required.')
    row = db.execute("SELECT id FROM companies WHERE id = ?", (company_id,)).fetchone()
    if not row:
        raise CompanyNotFoundError()


def create_asset(db, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert one asset for data['company_id'].

    Raises:
        ValidationError, CompanyNotFoundError, ConflictError (serial number)
    """
    if not data.get('company_id') or not _normalize_value(data.get('asset_name')):
        raise ValidationError('Company ID and Device Name are required.')

    fields = clean_asset_fields(data)
    _require_company(db, data['company_id'])

    try:
        cursor = db.execute(_INSERT_SQL, [data['company_id']] + [fields[f] for f in ASSET_FIELDS])
        db.commit()
    except ConflictError:
        raise ConflictError(_DUPLICATE_SERIAL)

    return get_asset(db, cursor.lastrowid)


def update_asset(db, asset_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """Full replace of the mutable fields of an asset."""
    fields = clean_asset_fields(data)

    if not get_asset(db, asset_id):
        raise AssetNotFoundError()

    assignments = ', '.join(f"{f} = ?" for f in ASSET_FIELDS)
    try:
        db.execute(
            f"UPDATE assets SET {assignments} WHERE id = ?",
            [fields[f] for f in ASSET_FIELDS] + [asset_id]
        )
        db.commit()
    except ConflictError:
        raise ConflictError(_DUPLICATE_SERIAL)

    return get_asset(db, asset_id)


def delete_asset(db, asset_id: int) -> None:
    if not is_row_id(asset_id):
        raise AssetNotFoundError()
    cursor = db.execute("DELETE FROM assets WHERE id = ?", (asset_id,))
    if cursor.rowcount == 0:
        db.rollback()
        raise AssetNotFoundError()
    db.commit()


def bulk_import_assets(db, company_id: int, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Insert many assets for one company, all or nothing.

    Args:
        company_id: Owning company
        rows: Row-like dicts; only asset fields are read, extra keys are ignored

    Returns:
        The created assets, in input order

    Raises:
        ValidationError: empty input, non-object row or row without asset_name
        CompanyNotFoundError: unknown company
        ConflictError: duplicate serial number (nothing is written)
    """
    if not rows:
        raise ValidationError('No assets to import.')

    cleaned = []
    for n, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            raise ValidationError(f'Row {n}: expected an object.')
        try:
            cleaned.append(clean_asset_fields(row))
        except ValidationError as e:
            raise ValidationError(f'Row {n}: {e.detail}')

    _require_company(db, company_id)

    new_ids = []
    with db.transaction():
        for n, fields in enumerate(cleaned, start=1):
            try:
                cursor = db.execute(_INSERT_SQL, [company_id] + [fields[f] for f in ASSET_FIELDS])
            except ConflictError:
                raise ConflictError(
                    f"Row {n}: an asset with serial number '{fields['serial_number']}' already exists."
                )
            new_ids.append(cursor.lastrowid)

    logger.info("Imported %d assets for company %s", len(new_ids), company_id)
    return get_assets_by_ids(db, new_ids)
