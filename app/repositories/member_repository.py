"""
Member repository - database operations for Member.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.member import Member
from app.models.referral import Referral
from app.utils.time import utc_now


class MemberRepository:
    """Repository for Member database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, search: Optional[str] = None) -> List[Member]:
        """
        List members, newest first.

        `search` is a case-insensitive substring matched against full name OR email.
        """
        query = select(Member)
        if search:
            # `%` and `_` in the term match literally
            query = query.where(
                or_(
                    Member.full_name.icontains(search, autoescape=True),
                    Member.email.icontains(search, autoescape=True),
                )
            )
        query = query.order_by(Member.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, member_id: UUID) -> Optional[Member]:
        """Get a member by ID (stage included)."""
        result = await self.db.execute(
            select(Member)
            .where(Member.id == member_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_with_referrals(self, member_id: UUID) -> Optional[Member]:
        """Get a member with its stage and referrals (newest referral first)."""
        result = await self.db.execute(
            select(Member)
            .where(Member.id == member_id)
            .options(
                selectinload(Member.referrals),
            )
            .execution_options(populate_existing=True)
        )
        member = result.scalar_one_or_none()
        if member is not None:
            member.referrals.sort(key=lambda r: (r.referral_date, r.created_at), reverse=True)
        return member

    async def get_by_email(self, email: str) -> Optional[Member]:
        """Exact (case-sensitive) email lookup."""
        result = await self.db.execute(
            select(Member).where(Member.email == email)
        )
        return result.scalar_one_or_none()

    async def count_by_stage(self, stage_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Member.id)).where(Member.stage_id == stage_id)
        )
        return int(result.scalar_one())

    async def create(self, data: Dict[str, Any], stage_id: str) -> Member:
        """Create a new member in the given stage."""
        member = Member(stage_id=stage_id, **data)
        self.db.add(member)
        await self.db.flush()
        return await self.get_by_id(member.id)

    async def update(self, member: Member, data: Dict[str, Any]) -> Member:
        """Apply field changes and bump updated_at."""
        for field, value in data.items():
            setattr(member, field, value)

        member.updated_at = utc_now()
        await self.db.flush()
        return await self.get_by_id(member.id)

    async def delete(self, member: Member) -> None:
        # Referrals are removed explicitly so backends without FK cascades agree
        await self.db.execute(delete(Referral).where(Referral.member_id == member.id))
        await self.db.delete(member)
        await self.db.flush()
