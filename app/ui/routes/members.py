"""
Members routes for UI.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from starlette.datastructures import UploadFile

from app.core.config import Settings
from app.core.dependencies import (
    get_member_service,
    get_referral_service,
    get_resume_service,
    get_settings_dep,
)
from app.errors import ErrorCode, OperationResult
from app.models.member import Member
from app.services.member_service import MemberService
from app.services.referral_service import ReferralService
from app.services.resume_service import ResumeService
from app.ui.dependencies import UIUser, get_current_ui_user
from app.ui.forms import profile_fields, update_fields
from app.ui.templating import redirect_to, render


router = APIRouter()

SORT_OPTIONS = {
    "created_at_desc": ("created_at", True),
    "created_at_asc": ("created_at", False),
    "full_name_asc": ("full_name", False),
    "full_name_desc": ("full_name", True),
}
DEFAULT_SORT = "created_at_desc"


def sort_members(members: List[Member], sort: str) -> List[Member]:
    field, reverse = SORT_OPTIONS.get(sort, SORT_OPTIONS[DEFAULT_SORT])
    if field == "full_name":
        return sorted(members, key=lambda m: m.full_name.lower(), reverse=reverse)
    return sorted(members, key=lambda m: m.created_at, reverse=reverse)


def paginate(items: List[Any], page: int, page_size: int) -> Dict[str, Any]:
    """Slice one page; out-of-range pages are clamped to the last page."""
    total = len(items)
    total_pages = max(1, (total + page_size - 1) // page_size)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return {
        "items": items[start:start + page_size],
        "page": page,
        "total": total,
        "total_pages": total_pages,
        "has_prev": page > 1,
        "has_next": page < total_pages,
    }


def field_errors(result: OperationResult) -> Dict[str, str]:
    if result.error and result.error.details:
        return result.error.details.get("fields", {})
    return {}


@router.get("/members", response_class=HTMLResponse)
async def members_list(
    request: Request,
    current_user: UIUser = Depends(get_current_ui_user),
    service: MemberService = Depends(get_member_service),
    settings: Settings = Depends(get_settings_dep),
    q: Optional[str] = Query(None),
    sort: str = Query(DEFAULT_SORT),
    page: int = Query(1),
):
    """
    Member list with search, sorting and pagination.
    """
    result = await service.list_members(q)
    members = result.data if result.success else []
    if sort not in SORT_OPTIONS:
        sort = DEFAULT_SORT

    pagination = paginate(sort_members(members, sort), page, settings.MEMBERS_PAGE_SIZE)

    return render(
        request,
        "members_list.html",
        {
            "current_user": current_user,
            "active_page": "members",
            "members": pagination["items"],
            "pagination": pagination,
            "q": q or "",
            "sort": sort,
            "sort_options": list(SORT_OPTIONS),
            "load_error": None if result.success else result.error.message,
        },
    )


# CREATE ROUTES (must come before /members/{member_id})

@router.get("/members/new", response_class=HTMLResponse)
async def member_create_form(
    request: Request,
    current_user: UIUser = Depends(get_current_ui_user),
):
    return render(
        request,
        "member_form.html",
        {
            "current_user": current_user,
            "active_page": "members",
            "mode": "create",
            "values": {},
            "field_errors": {},
        },
    )


@router.post("/members/new", response_class=HTMLResponse)
async def member_create(
    request: Request,
    current_user: UIUser = Depends(get_current_ui_user),
    service: MemberService = Depends(get_member_service),
    resumes: ResumeService = Depends(get_resume_service),
):
    """Create a member from the staff form, uploading the résumé first when attached."""
    form = await request.form()
    values = profile_fields(form)
    notes = form.get("notes")
    if isinstance(notes, str) and notes.strip():
        values["notes"] = notes.strip()

    def form_error(message: str, errors: Optional[Dict[str, str]] = None, status_code: int = 400):
        return render(
            request,
            "member_form.html",
            {
                "current_user": current_user,
                "active_page": "members",
                "mode": "create",
                "values": values,
                "field_errors": errors or {},
                "error": message,
            },
            status_code=status_code,
        )

    uploaded_url = None
    cv = form.get("cv")
    if isinstance(cv, UploadFile) and cv.filename:
        data = await cv.read()
        upload = await resumes.upload_resume(cv.filename, cv.content_type, data)
        if not upload.success:
            return form_error(upload.error.message)
        uploaded_url = upload.data
        values["cv_file_url"] = uploaded_url

    result = await service.create_member(values)
    if not result.success:
        if uploaded_url:
            await resumes.discard(resumes.storage.key_from_url(uploaded_url))
        status_code = 500 if result.error_code in (ErrorCode.STORE_FAILURE, ErrorCode.CONFIGURATION_ERROR) else 400
        return form_error(result.error.message, field_errors(result), status_code)

    return redirect_to(f"/members/{result.data.id}", msg="Member created")


@router.get("/members/{member_id}", response_class=HTMLResponse)
async def member_detail(
    request: Request,
    member_id: UUID,
    current_user: UIUser = Depends(get_current_ui_user),
    service: MemberService = Depends(get_member_service),
):
    """Member profile with inline edit form and referrals."""
    result = await service.get_member(member_id)
    if not result.success:
        if result.error_code is ErrorCode.NOT_FOUND:
            return redirect_to("/members", error="Member not found")
        return redirect_to("/members", error=result.error.message)

    return render(
        request,
        "member_detail.html",
        {
            "current_user": current_user,
            "active_page": "members",
            "member": result.data,
            "field_errors": {},
        },
    )


@router.post("/members/{member_id}/edit", response_class=HTMLResponse)
async def member_update(
    request: Request,
    member_id: UUID,
    current_user: UIUser = Depends(get_current_ui_user),
    service: MemberService = Depends(get_member_service),
):
    form = await request.form()
    result = await service.update_member(member_id, update_fields(form))

    if not result.success:
        if result.error_code is ErrorCode.NOT_FOUND:
            return redirect_to("/members", error="Member not found")
        current = await service.get_member(member_id)
        if not current.success:
            return redirect_to("/members", error=result.error.message)
        return render(
            request,
            "member_detail.html",
            {
                "current_user": current_user,
                "active_page": "members",
                "member": current.data,
                "field_errors": field_errors(result),
                "error": result.error.message,
            },
            status_code=400,
        )

    return redirect_to(f"/members/{member_id}", msg="Member updated")


@router.post("/members/{member_id}/delete")
async def member_delete(
    member_id: UUID,
    current_user: UIUser = Depends(get_current_ui_user),
    service: MemberService = Depends(get_member_service),
):
    result = await service.delete_member(member_id)
    if not result.success:
        return redirect_to(f"/members/{member_id}", error=result.error.message)
    return redirect_to("/members", msg="Member deleted")


# REFERRAL ROUTES

@router.post("/members/{member_id}/referrals")
async def referral_create(
    member_id: UUID,
    current_user: UIUser = Depends(get_current_ui_user),
    service: ReferralService = Depends(get_referral_service),
    company_name: str = Form(""),
    referral_date: str = Form(""),
    notes: Optional[str] = Form(None),
):
    result = await service.create_referral(
        member_id,
        {"company_name": company_name, "referral_date": referral_date, "notes": notes},
    )
    if not result.success:
        return redirect_to(f"/members/{member_id}", error=result.error.message)
    return redirect_to(f"/members/{member_id}", msg="Referral added")


@router.post("/referrals/{referral_id}/edit")
async def referral_update(
    referral_id: UUID,
    current_user: UIUser = Depends(get_current_ui_user),
    service: ReferralService = Depends(get_referral_service),
    member_id: UUID = Form(...),
    company_name: str = Form(""),
    referral_date: str = Form(""),
    notes: Optional[str] = Form(None),
):
    result = await service.update_referral(
        referral_id,
        {"company_name": company_name, "referral_date": referral_date, "notes": notes},
    )
    if not result.success:
        return redirect_to(f"/members/{member_id}", error=result.error.message)
    return redirect_to(f"/members/{member_id}", msg="Referral updated")


@router.post("/referrals/{referral_id}/delete")
async def referral_delete(
    referral_id: UUID,
    current_user: UIUser = Depends(get_current_ui_user),
    service: ReferralService = Depends(get_referral_service),
    member_id: UUID = Form(...),
):
    result = await service.delete_referral(referral_id)
    if not result.success:
        return redirect_to(f"/members/{member_id}", error=result.error.message)
    return redirect_to(f"/members/{member_id}", msg="Referral deleted")
