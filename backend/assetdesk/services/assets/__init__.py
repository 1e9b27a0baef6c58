"""
Asset register - queries, commands and spreadsheet exchange.
"""

from .queries import get_asset, get_company_assets, get_assets_by_ids, get_ticket_assets
from .commands import (
    create_asset,
    update_asset,
    delete_asset,
    bulk_import_assets,
    clean_asset_fields,
)
from .spreadsheet import export_assets_xlsx, read_assets_xlsx, XLSX_MEDIA_TYPE

__all__ = [
    # Queries
    'get_asset',
    'get_company_assets',
    'get_assets_by_ids',
    'get_ticket_assets',
    # Commands
    'create_asset',
    'update_asset',
    'delete_asset',
    'bulk_import_assets',
    'clean_asset_fields',
    # Spreadsheet
    'export_assets_xlsx',
    'read_assets_xlsx',
    'XLSX_MEDIA_TYPE',
]
