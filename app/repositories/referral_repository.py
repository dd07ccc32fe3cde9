"""
Referral repository - database operations for Referral.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.referral import Referral
from app.schemas.referral import ReferralData
from app.utils.time import utc_now


class ReferralRepository:
    """Repository for Referral database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_by_member(self, member_id: UUID) -> List[Referral]:
        """Referrals of a member, newest referral date first."""
        result = await self.db.execute(
            select(Referral)
            .where(Referral.member_id == member_id)
            .order_by(Referral.referral_date.desc(), Referral.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_id(self, referral_id: UUID) -> Optional[Referral]:
        result = await self.db.execute(
            select(Referral).where(Referral.id == referral_id)
        )
        return result.scalar_one_or_none()

    async def create(self, member_id: UUID, data: ReferralData) -> Referral:
        referral = Referral(member_id=member_id, **data.model_dump())
        self.db.add(referral)
        await self.db.flush()
        return referral

    async def update(self, referral: Referral, data: ReferralData) -> Referral:
        for field, value in data.model_dump().items():
            setattr(referral, field, value)
        referral.updated_at = utc_now()
        await self.db.flush()
        return referral

    async def delete(self, referral: Referral) -> None:
        await self.db.delete(referral)
        await self.db.flush()
