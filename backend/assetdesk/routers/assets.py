# =============================================================================
# ASSETDESK - ASSETS ROUTER
# =============================================================================
# Hardware/software items owned by a company.
# =============================================================================

from typing import Dict, Any, List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from ..auth.dependencies import get_current_user, require_admin
from ..auth.models import CurrentUser
from ..database import get_db
from ..exceptions import AssetNotFoundError, ValidationError
from ..services.assets import (
    bulk_import_assets,
    create_asset,
    delete_asset,
    get_asset,
    update_asset,
)

router = APIRouter(prefix="/assets", tags=["Assets"])


class AssetRequest(BaseModel):
    """Asset fields; company_id is read on create only"""
    company_id: Optional[int] = None
    asset_name: Optional[str] = None
    description: Optional[str] = None
    serial_number: Optional[str] = None
    status: Optional[str] = None
    device_type: Optional[str] = None
    owner_location: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    operating_system: Optional[str] = None


class BulkImportRequest(BaseModel):
    """Many assets for one company"""
    company_id: Optional[int] = None
    assets: Optional[List[Any]] = None


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
def post_assets_bulk(
    request: BulkImportRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Dict[str, Any]:
    """
    Import many assets at once.

    All rows are validated first and inserted in one transaction: on any
    failure nothing is imported.
    """
    if not request.company_id:
        raise ValidationError('Company ID is required.')
    assets = bulk_import_assets(db, request.company_id, request.assets or [])
    return {"imported": len(assets), "assets": assets}


@router.get("/{asset_id}")
def get_asset_by_id(
    asset_id: int,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Dict[str, Any]:
    asset = get_asset(db, asset_id)
    if not asset:
        raise AssetNotFoundError()
    return asset


@router.post("", status_code=status.HTTP_201_CREATED)
def post_asset(
    request: AssetRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Dict[str, Any]:
    return create_asset(db, request.model_dump())


@router.put("/{asset_id}")
def put_asset(
    asset_id: int,
    request: AssetRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> Dict[str, Any]:
    return update_asset(db, asset_id, request.model_dump())


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_asset(
    asset_id: int,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> Response:
    delete_asset(db, asset_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
