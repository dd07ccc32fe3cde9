"""
Public application endpoint.

Unauthenticated. Accepts the application form as multipart (or urlencoded)
fields, optionally with the résumé PDF in the `cv` field. Responds with
{"success": bool, "error"?: str}: 400 for invalid data or a duplicate email,
500 for anything else, without internal detail.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from app.core.dependencies import get_member_service, get_resume_service
from app.errors import ErrorCode
from app.schemas.member import ApplicationSubmission
from app.services.member_service import MemberService
from app.services.operation import validation_details
from app.services.resume_service import ResumeService
from app.ui.forms import profile_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Apply"])

INVALID_DATA_MESSAGE = "Invalid data"
SERVER_ERROR_MESSAGE = "Internal server error"


def _failure(status_code: int, message: str, details: Dict[str, Any] | None = None) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@router.post("/apply")
async def submit_application(
    request: Request,
    members: MemberService = Depends(get_member_service),
    resumes: ResumeService = Depends(get_resume_service),
):
    """Create a member in the intake stage from the public application form."""
    form = await request.form()
    fields = profile_fields(form)
    cv_file_url = form.get("cv_file_url")
    if isinstance(cv_file_url, str) and cv_file_url.strip():
        fields["cv_file_url"] = cv_file_url.strip()

    try:
        submission = ApplicationSubmission.model_validate(fields)
    except ValidationError as exc:
        return _failure(status.HTTP_400_BAD_REQUEST, INVALID_DATA_MESSAGE, validation_details(exc))

    uploaded_key = None
    cv = form.get("cv")
    if isinstance(cv, UploadFile) and cv.filename:
        data = await cv.read()
        if data:
            upload = await resumes.upload_resume(cv.filename, cv.content_type, data)
            if not upload.success:
                if upload.error_code is ErrorCode.VALIDATION_ERROR:
                    return _failure(status.HTTP_400_BAD_REQUEST, upload.error.message)
                return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Could not upload the résumé")
            submission.cv_file_url = upload.data
            uploaded_key = resumes.storage.key_from_url(upload.data)

    result = await members.submit_application(submission)
    if result.success:
        return {"success": True}

    if uploaded_key:
        await resumes.discard(uploaded_key)

    if result.error_code in (ErrorCode.VALIDATION_ERROR, ErrorCode.CONFLICT):
        return _failure(status.HTTP_400_BAD_REQUEST, result.error.message)

    logger.error("Application from %s failed: %s", submission.email, result.error.message)
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)
