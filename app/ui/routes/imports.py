"""
Bulk import routes for UI.
"""

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import HTMLResponse

from app.core.dependencies import get_import_service
from app.services.member_import_service import COLUMN_ALIASES, MemberImportService
from app.ui.dependencies import UIUser, get_current_ui_user
from app.ui.templating import render


router = APIRouter()


@router.get("/import", response_class=HTMLResponse)
async def import_page(
    request: Request,
    current_user: UIUser = Depends(get_current_ui_user),
):
    return render(
        request,
        "import.html",
        {
            "current_user": current_user,
            "active_page": "import",
            "aliases": COLUMN_ALIASES,
            "result": None,
        },
    )


@router.post("/import", response_class=HTMLResponse)
async def import_submit(
    request: Request,
    current_user: UIUser = Depends(get_current_ui_user),
    service: MemberImportService = Depends(get_import_service),
    file: UploadFile = File(...),
):
    """Import a .csv or .xlsx file and show the summary with per-row failure reasons."""
    content = await file.read()
    result = await service.import_file(content, file.filename)

    return render(
        request,
        "import.html",
        {
            "current_user": current_user,
            "active_page": "import",
            "aliases": COLUMN_ALIASES,
            "result": result.data if result.success else None,
            "error": None if result.success else result.error.message,
        },
        status_code=200 if result.success else 400,
    )
