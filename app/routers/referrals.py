"""
Referral API endpoints (create/list live under /api/members/{id}/referrals).
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_current_api_user, get_referral_service
from app.schemas.referral import ReferralData, ReferralRead
from app.services.referral_service import ReferralService

router = APIRouter(
    prefix="/api/referrals",
    tags=["Referrals"],
    dependencies=[Depends(get_current_api_user)],
)


@router.put("/{referral_id}", response_model=ReferralRead)
async def update_referral(
    referral_id: UUID,
    data: ReferralData,
    service: ReferralService = Depends(get_referral_service),
):
    result = await service.update_referral(referral_id, data)
    return result.unwrap()


@router.delete("/{referral_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_referral(
    referral_id: UUID,
    service: ReferralService = Depends(get_referral_service),
):
    result = await service.delete_referral(referral_id)
    result.unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
