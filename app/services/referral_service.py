"""
Referral business logic service.
"""

from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFound
from app.models.referral import Referral
from app.repositories.member_repository import MemberRepository
from app.repositories.referral_repository import ReferralRepository
from app.schemas.referral import ReferralData
from app.services.member_service import _coerce
from app.services.operation import domain_operation
from app.services.view_invalidation import MEMBERS_VIEW, ViewInvalidator, member_view


class ReferralService:
    """Service for referral CRUD scoped to a member."""

    def __init__(self, db: AsyncSession, views: Optional[ViewInvalidator] = None):
        self.db = db
        self.repository = ReferralRepository(db)
        self.member_repository = MemberRepository(db)
        self.views = views

    def _invalidate(self, member_id: UUID) -> None:
        if self.views is not None:
            self.views.invalidate(member_view(member_id), MEMBERS_VIEW)

    @domain_operation("Could not load the referrals")
    async def list_referrals(self, member_id: UUID) -> List[Referral]:
        return await self.repository.list_by_member(member_id)

    @domain_operation("Could not create the referral")
    async def create_referral(self, member_id: UUID, data: Union[ReferralData, Dict[str, Any]]) -> Referral:
        payload = _coerce(ReferralData, data)

        if await self.member_repository.get_by_id(member_id) is None:
            raise NotFound("Member not found")

        referral = await self.repository.create(member_id, payload)
        await self.db.commit()
        self._invalidate(member_id)
        return referral

    @domain_operation("Could not update the referral")
    async def update_referral(self, referral_id: UUID, data: Union[ReferralData, Dict[str, Any]]) -> Referral:
        payload = _coerce(ReferralData, data)

        referral = await self.repository.get_by_id(referral_id)
        if referral is None:
            raise NotFound("Referral not found")

        referral = await self.repository.update(referral, payload)
        await self.db.commit()
        self._invalidate(referral.member_id)
        return referral

    @domain_operation("Could not delete the referral")
    async def delete_referral(self, referral_id: UUID) -> UUID:
        """Delete a referral; returns the owning member id."""
        referral = await self.repository.get_by_id(referral_id)
        if referral is None:
            raise NotFound("Referral not found")

        member_id = referral.member_id
        await self.repository.delete(referral)
        await self.db.commit()
        self._invalidate(member_id)
        return member_id
