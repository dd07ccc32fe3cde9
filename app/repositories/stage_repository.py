"""
Stage repository - database operations for Stage.
"""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.member import Member
from app.models.stage import Stage
from app.utils.time import utc_now


class StageRepository:
    """Repository for Stage database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> List[Stage]:
        result = await self.db.execute(select(Stage).order_by(Stage.order.asc()))
        return list(result.scalars().all())

    async def list_with_counts(self) -> List[Tuple[Stage, int]]:
        """Stages in pipeline order, each with its member count."""
        member_count = (
            select(func.count(Member.id))
            .where(Member.stage_id == Stage.id)
            .correlate(Stage)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(Stage, member_count.label("member_count")).order_by(Stage.order.asc())
        )
        return [(row[0], int(row[1])) for row in result.all()]

    async def list_with_members(self) -> List[Stage]:
        """Stages in pipeline order with members, most recently updated first."""
        result = await self.db.execute(
            select(Stage)
            .options(selectinload(Stage.members))
            .order_by(Stage.order.asc())
            .execution_options(populate_existing=True)
        )
        stages = list(result.scalars().all())
        for stage in stages:
            stage.members.sort(key=lambda m: m.updated_at, reverse=True)
        return stages

    async def get_by_id(self, stage_id: str) -> Optional[Stage]:
        result = await self.db.execute(
            select(Stage)
            .where(Stage.id == stage_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, stage_ids: Sequence[str]) -> List[Stage]:
        result = await self.db.execute(select(Stage).where(Stage.id.in_(list(stage_ids))))
        return list(result.scalars().all())

    async def get_intake(self) -> Optional[Stage]:
        """The stage with order 1, where new members land."""
        result = await self.db.execute(select(Stage).where(Stage.order == 1).limit(1))
        return result.scalar_one_or_none()

    async def max_order(self) -> int:
        result = await self.db.execute(select(func.max(Stage.order)))
        return int(result.scalar_one_or_none() or 0)

    async def create(self, stage_id: str, name: str, order: int) -> Stage:
        stage = Stage(id=stage_id, name=name, order=order)
        self.db.add(stage)
        await self.db.flush()
        return stage

    async def rename(self, stage: Stage, name: str) -> Stage:
        stage.name = name
        stage.updated_at = utc_now()
        await self.db.flush()
        return stage

    async def set_order(self, stage: Stage, order: int) -> None:
        stage.order = order
        stage.updated_at = utc_now()

    async def delete(self, stage: Stage) -> None:
        await self.db.delete(stage)
        await self.db.flush()
