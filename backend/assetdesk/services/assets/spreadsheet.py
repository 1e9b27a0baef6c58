"""
Asset register spreadsheet export/import (xlsx, openpyxl).

The sheet has one header row with the asset field names followed by one
row per asset. Export then import yields equivalent assets.
"""

import io
import zipfile
from typing import List, Dict, Any

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from ...exceptions import ValidationError
from ..constants import ASSET_FIELDS

SHEET_TITLE = "Assets"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

REQUIRED_COLUMNS = ['asset_name']


def export_assets_xlsx(assets: List[Dict[str, Any]]) -> bytes:
    """Workbook bytes for the given asset rows."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")

    ws.append(ASSET_FIELDS)
    for col, _ in enumerate(ASSET_FIELDS, start=1):
        cell = ws.cell(row=1, column=col)
        cell.font = header_font
        cell.fill = header_fill
        ws.column_dimensions[get_column_letter(col)].width = 20

    for asset in assets:
        ws.append([asset.get(f) for f in ASSET_FIELDS])

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def read_assets_xlsx(content: bytes) -> List[Dict[str, Any]]:
    """
    Rows of the first sheet as dicts keyed by the header row.

    Raises:
        ValidationError: unreadable file, empty sheet or missing required columns
    """
    try:
        wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError):
        raise ValidationError('The selected file is not a readable .xlsx workbook.')

    try:
        rows = list(wb.active.iter_rows(values_only=True))
    finally:
        wb.close()

    if len(rows) < 2:
        raise ValidationError('The selected file is empty or not formatted correctly.')

    header = [str(h).strip() if h is not None else '' for h in rows[0]]
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        raise ValidationError(
            f"The imported file is missing required columns: {', '.join(missing)}"
        )

    records = []
    for values in rows[1:]:
        if all(v is None or (isinstance(v, str) and not v.strip()) for v in values):
            continue
        records.append({
            name: value for name, value in zip(header, values) if name
        })

    if not records:
        raise ValidationError('The selected file is empty or not formatted correctly.')
    return records
