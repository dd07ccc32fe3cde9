"""
Member API endpoints.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.dependencies import (
    get_current_api_user,
    get_member_service,
    get_referral_service,
)
from app.schemas.member import (
    MemberCreate,
    MemberDetail,
    MemberRead,
    MemberUpdate,
    StageTransition,
)
from app.schemas.referral import ReferralData, ReferralRead
from app.services.member_service import MemberService
from app.services.referral_service import ReferralService

router = APIRouter(
    prefix="/api/members",
    tags=["Members"],
    dependencies=[Depends(get_current_api_user)],
)


@router.get("", response_model=List[MemberRead])
async def list_members(
    q: Optional[str] = Query(None, description="Substring of the full name or email"),
    service: MemberService = Depends(get_member_service),
):
    """List members, newest first."""
    result = await service.list_members(q)
    return result.unwrap()


@router.post("", response_model=MemberRead, status_code=status.HTTP_201_CREATED)
async def create_member(
    data: MemberCreate,
    service: MemberService = Depends(get_member_service),
):
    """Create a member in the intake stage."""
    result = await service.create_member(data)
    return result.unwrap()


@router.get("/{member_id}", response_model=MemberDetail)
async def get_member(
    member_id: UUID,
    service: MemberService = Depends(get_member_service),
):
    result = await service.get_member(member_id)
    return result.unwrap()


@router.patch("/{member_id}", response_model=MemberRead)
async def update_member(
    member_id: UUID,
    data: MemberUpdate,
    service: MemberService = Depends(get_member_service),
):
    """Update profile fields. Only provided fields are changed."""
    result = await service.update_member(member_id, data)
    return result.unwrap()


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    member_id: UUID,
    service: MemberService = Depends(get_member_service),
):
    result = await service.delete_member(member_id)
    result.unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{member_id}/stage", response_model=MemberRead)
async def move_member(
    member_id: UUID,
    data: StageTransition,
    service: MemberService = Depends(get_member_service),
):
    """Move a member to another stage, optionally recording the hire outcome."""
    result = await service.move_to_stage(member_id, data.stage_id, data.hire_info)
    return result.unwrap()


@router.get("/{member_id}/referrals", response_model=List[ReferralRead])
async def list_referrals(
    member_id: UUID,
    service: ReferralService = Depends(get_referral_service),
):
    result = await service.list_referrals(member_id)
    return result.unwrap()


@router.post(
    "/{member_id}/referrals",
    response_model=ReferralRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_referral(
    member_id: UUID,
    data: ReferralData,
    service: ReferralService = Depends(get_referral_service),
):
    result = await service.create_referral(member_id, data)
    return result.unwrap()
