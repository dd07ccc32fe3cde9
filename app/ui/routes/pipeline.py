"""
Pipeline board and stage management routes for UI.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from app.core.config import Settings
from app.core.dependencies import get_member_service, get_settings_dep, get_stage_service
from app.services.member_service import MemberService
from app.services.stage_service import StageService
from app.services.stage_transition import is_hired_stage
from app.ui.dependencies import UIUser, get_current_ui_user
from app.ui.forms import hire_fields
from app.ui.templating import redirect_to, render


router = APIRouter()


@router.get("/pipeline", response_class=HTMLResponse)
async def pipeline_board(
    request: Request,
    current_user: UIUser = Depends(get_current_ui_user),
    service: StageService = Depends(get_stage_service),
    settings: Settings = Depends(get_settings_dep),
):
    """
    Kanban board: one column per stage, cards ordered by last update.

    Dropping a card on the hired column asks for the hire details first.
    """
    result = await service.get_board()
    stages = result.data if result.success else []

    return render(
        request,
        "pipeline.html",
        {
            "current_user": current_user,
            "active_page": "pipeline",
            "stages": stages,
            "hired_stage_ids": [stage.id for stage in stages if is_hired_stage(stage, settings)],
            "load_error": None if result.success else result.error.message,
        },
    )


@router.post("/pipeline/move", response_class=HTMLResponse)
async def pipeline_move(
    request: Request,
    current_user: UIUser = Depends(get_current_ui_user),
    members: MemberService = Depends(get_member_service),
    stages: StageService = Depends(get_stage_service),
    settings: Settings = Depends(get_settings_dep),
    member_id: UUID = Form(...),
    stage_id: str = Form(...),
    skip_hire_info: Optional[str] = Form(None),
):
    """Move a card. Moves into the hired stage go through the hire prompt unless skipped."""
    form = await request.form()
    hire_info = hire_fields(form)

    if hire_info is None and not skip_hire_info:
        lookup = await stages.get_stage(stage_id)
        target = lookup.data if lookup.success else None
        if target is not None and is_hired_stage(target, settings):
            member = await members.get_member(member_id)
            if not member.success:
                return redirect_to("/pipeline", error=member.error.message)
            return render(
                request,
                "hire_prompt.html",
                {
                    "current_user": current_user,
                    "active_page": "pipeline",
                    "member": member.data,
                    "stage": target,
                },
            )

    result = await members.move_to_stage(member_id, stage_id, hire_info)
    if not result.success:
        return redirect_to("/pipeline", error=result.error.message)
    return redirect_to("/pipeline")


@router.get("/pipeline/stages", response_class=HTMLResponse)
async def stages_page(
    request: Request,
    current_user: UIUser = Depends(get_current_ui_user),
    service: StageService = Depends(get_stage_service),
):
    result = await service.list_stages()
    return render(
        request,
        "stages.html",
        {
            "current_user": current_user,
            "active_page": "pipeline",
            "stages": result.data if result.success else [],
            "load_error": None if result.success else result.error.message,
        },
    )


@router.post("/pipeline/stages")
async def stage_create(
    current_user: UIUser = Depends(get_current_ui_user),
    service: StageService = Depends(get_stage_service),
    name: str = Form(""),
):
    result = await service.create_stage({"name": name})
    if not result.success:
        return redirect_to("/pipeline/stages", error=result.error.message)
    return redirect_to("/pipeline/stages", msg=f"Stage {result.data.name} created")


@router.post("/pipeline/stages/{stage_id}/rename")
async def stage_rename(
    stage_id: str,
    current_user: UIUser = Depends(get_current_ui_user),
    service: StageService = Depends(get_stage_service),
    name: str = Form(""),
):
    result = await service.rename_stage(stage_id, {"name": name})
    if not result.success:
        return redirect_to("/pipeline/stages", error=result.error.message)
    return redirect_to("/pipeline/stages", msg="Stage renamed")


@router.post("/pipeline/stages/{stage_id}/delete")
async def stage_delete(
    stage_id: str,
    current_user: UIUser = Depends(get_current_ui_user),
    service: StageService = Depends(get_stage_service),
):
    result = await service.delete_stage(stage_id)
    if not result.success:
        return redirect_to("/pipeline/stages", error=result.error.message)
    return redirect_to("/pipeline/stages", msg="Stage deleted")


@router.post("/pipeline/stages/{stage_id}/move")
async def stage_move(
    stage_id: str,
    current_user: UIUser = Depends(get_current_ui_user),
    service: StageService = Depends(get_stage_service),
    direction: str = Form(...),
):
    """Swap a stage with its left ("up") or right ("down") neighbour."""
    listing = await service.list_stages()
    if not listing.success:
        return redirect_to("/pipeline/stages", error=listing.error.message)

    ids = [stage.id for stage, _ in listing.data]
    if stage_id not in ids:
        return redirect_to("/pipeline/stages", error="Stage not found")

    index = ids.index(stage_id)
    other = index - 1 if direction == "up" else index + 1
    if 0 <= other < len(ids):
        ids[index], ids[other] = ids[other], ids[index]
        result = await service.reorder_stages(ids)
        if not result.success:
            return redirect_to("/pipeline/stages", error=result.error.message)

    return redirect_to("/pipeline/stages")
