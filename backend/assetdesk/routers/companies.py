# =============================================================================
# ASSETDESK - COMPANIES ROUTER
# =============================================================================
# Customer organizations, plus the per-company asset views:
# - GET  /companies/{id}/assets         - asset list
# - GET  /companies/{id}/assets/export  - xlsx download
# - POST /companies/{id}/assets/import  - xlsx upload (all-or-nothing)
# =============================================================================

import io
from typing import Dict, Any, List, Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from ..auth.dependencies import get_current_user, require_admin
from ..auth.models import CurrentUser
from ..database import get_db
from ..exceptions import CompanyNotFoundError, ValidationError
from ..services.assets import (
    XLSX_MEDIA_TYPE,
    bulk_import_assets,
    export_assets_xlsx,
    get_company_assets,
    read_assets_xlsx,
)
from ..services.companies import (
    create_company,
    delete_company,
    get_company,
    list_companies,
    update_company,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


class CompanyRequest(BaseModel):
    """Company fields (create and full replace)"""
    name: Optional[str] = None
    contact_person: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None


def _require_company(db, company_id: int) -> Dict[str, Any]:
    company = get_company(db, company_id)
    if not company:
        raise CompanyNotFoundError()
    return company


# =============================================================================
# COMPANIES
# =============================================================================

@router.get("")
def get_companies(
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> List[Dict[str, Any]]:
    return list_companies(db)


@router.post("", status_code=status.HTTP_201_CREATED)
def post_company(
    request: CompanyRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Dict[str, Any]:
    return create_company(db, request.model_dump())


@router.put("/{company_id}")
def put_company(
    company_id: int,
    request: CompanyRequest,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> Dict[str, Any]:
    return update_company(db, company_id, request.model_dump())


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_company(
    company_id: int,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
) -> Response:
    """Delete a company together with its assets and tickets."""
    delete_company(db, company_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# COMPANY ASSETS
# =============================================================================

@router.get("/{company_id}/assets")
def get_assets_of_company(
    company_id: int,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> List[Dict[str, Any]]:
    return get_company_assets(db, company_id)


@router.get("/{company_id}/assets/export")
def export_company_assets(
    company_id: int,
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Download the company's assets as an Excel workbook."""
    company = _require_company(db, company_id)
    content = export_assets_xlsx(get_company_assets(db, company_id))

    filename = f"assets_company_{company['id']}.xlsx"
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.post("/{company_id}/assets/import", status_code=status.HTTP_201_CREATED)
def import_company_assets(
    company_id: int,
    file: UploadFile = File(...),
    db=Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Dict[str, Any]:
    """
    Import assets from an Excel workbook.

    The first row must hold the column names; asset_name is mandatory.
    Nothing is written unless every row is valid.
    """
    if not file.filename or not file.filename.lower().endswith('.xlsx'):
        raise ValidationError('Only .xlsx files are accepted.')

    _require_company(db, company_id)
    rows = read_assets_xlsx(file.file.read())
    assets = bulk_import_assets(db, company_id, rows)
    return {"imported": len(assets), "assets": assets}
