"""
Bulk member import endpoints.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from app.core.dependencies import get_current_api_user, get_import_service
from app.schemas.member_import import ImportRequest, ImportResult
from app.services.member_import_service import MemberImportService

router = APIRouter(
    prefix="/api/members/import",
    tags=["Import"],
    dependencies=[Depends(get_current_api_user)],
)


@router.post("", response_model=ImportResult)
async def import_rows(
    data: ImportRequest,
    service: MemberImportService = Depends(get_import_service),
):
    """
    Import rows already read from a spreadsheet.

    Each row maps column headers to cell values; headers are matched against
    the known aliases (e.g. "Correo" or "E-mail" for the email column).
    """
    result = await service.import_rows(data.rows)
    return result.unwrap()


@router.post("/file", response_model=ImportResult)
async def import_file(
    file: UploadFile = File(...),
    service: MemberImportService = Depends(get_import_service),
):
    """Import a .csv or .xlsx file whose first row holds the column headers."""
    content = await file.read()
    result = await service.import_file(content, file.filename)
    return result.unwrap()
