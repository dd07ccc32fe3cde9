"""
Résumé upload endpoint for the staff dashboard.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.core.dependencies import get_current_api_user, get_resume_service
from app.services.resume_service import ResumeService

router = APIRouter(
    prefix="/api/uploads",
    tags=["Uploads"],
    dependencies=[Depends(get_current_api_user)],
)


@router.post("/resume", status_code=status.HTTP_201_CREATED)
async def upload_resume(
    file: UploadFile = File(...),
    service: ResumeService = Depends(get_resume_service),
):
    """Store a PDF résumé and return its public URL."""
    data = await file.read()
    result = await service.upload_resume(file.filename, file.content_type, data)
    return {"url": result.unwrap()}
