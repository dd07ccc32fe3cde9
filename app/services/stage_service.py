"""
Stage business logic service.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFound, StageNotEmpty
from app.models.stage import Stage
from app.repositories.member_repository import MemberRepository
from app.repositories.stage_repository import StageRepository
from app.schemas.stage import StageData, StageReorder
from app.services.member_service import _coerce
from app.services.operation import domain_operation
from app.services.view_invalidation import MEMBERS_VIEW, PIPELINE_VIEW, ViewInvalidator
from app.utils.slug import slugify, unique_slug

logger = logging.getLogger(__name__)

# (id, name, order) created by scripts/seed.py
DEFAULT_STAGES: List[Tuple[str, str, int]] = [
    ("info-cargada", "Info Cargada", 1),
    ("calificado", "Calificado", 2),
    ("referido", "Referido", 3),
    ("contratado", "Contratado", 4),
]


class StageService:
    """Service for pipeline stage management."""

    def __init__(self, db: AsyncSession, views: Optional[ViewInvalidator] = None):
        self.db = db
        self.repository = StageRepository(db)
        self.member_repository = MemberRepository(db)
        self.views = views

    def _invalidate(self, *views: str) -> None:
        if self.views is not None:
            self.views.invalidate(*views)

    @domain_operation("Could not load the stages")
    async def list_stages(self) -> List[Tuple[Stage, int]]:
        """Stages in order, each paired with its member count."""
        return await self.repository.list_with_counts()

    @domain_operation("Could not load the pipeline")
    async def get_board(self) -> List[Stage]:
        """Stages in order with their members, most recently updated first."""
        return await self.repository.list_with_members()

    @domain_operation("Could not load the stage")
    async def get_stage(self, stage_id: str) -> Stage:
        stage = await self.repository.get_by_id(stage_id)
        if stage is None:
            raise NotFound("Stage not found")
        return stage

    @domain_operation("Could not create the stage")
    async def create_stage(self, data: Union[StageData, Dict[str, Any]]) -> Stage:
        """Append a stage after the current last one."""
        payload = _coerce(StageData, data)

        existing_ids = {stage.id for stage in await self.repository.list()}
        stage_id = unique_slug(slugify(payload.name, fallback="stage"), existing_ids)
        order = await self.repository.max_order() + 1

        stage = await self.repository.create(stage_id, payload.name, order)
        await self.db.commit()
        logger.info("Created stage %s at position %d", stage.id, order)
        self._invalidate(PIPELINE_VIEW)
        return stage

    @domain_operation("Could not update the stage")
    async def rename_stage(self, stage_id: str, data: Union[StageData, Dict[str, Any]]) -> Stage:
        """Change the display name only; id and order stay as they are."""
        payload = _coerce(StageData, data)

        stage = await self.repository.get_by_id(stage_id)
        if stage is None:
            raise NotFound("Stage not found")

        stage = await self.repository.rename(stage, payload.name)
        await self.db.commit()
        self._invalidate(PIPELINE_VIEW, MEMBERS_VIEW)
        return stage

    @domain_operation("Could not delete the stage")
    async def delete_stage(self, stage_id: str) -> None:
        stage = await self.repository.get_by_id(stage_id)
        if stage is None:
            raise NotFound("Stage not found")

        member_count = await self.member_repository.count_by_stage(stage_id)
        if member_count > 0:
            raise StageNotEmpty(
                "Cannot delete a stage that has members",
                {"member_count": member_count},
            )

        await self.repository.delete(stage)
        await self.db.commit()
        logger.info("Deleted stage %s", stage_id)
        self._invalidate(PIPELINE_VIEW)

    @domain_operation("Could not reorder the stages")
    async def reorder_stages(self, data: Union[StageReorder, List[str], Dict[str, Any]]) -> List[Stage]:
        """
        Rewrite each stage's order to its 1-based position in the given id list.

        All rows change in one transaction; an unknown id aborts the whole reorder.
        """
        if isinstance(data, list):
            data = {"stage_ids": data}
        payload = _coerce(StageReorder, data)

        stages = {stage.id: stage for stage in await self.repository.get_by_ids(payload.stage_ids)}
        missing = [stage_id for stage_id in payload.stage_ids if stage_id not in stages]
        if missing:
            raise NotFound("Stage not found", {"missing": missing})

        for position, stage_id in enumerate(payload.stage_ids, start=1):
            await self.repository.set_order(stages[stage_id], position)

        await self.db.flush()
        await self.db.commit()
        logger.info("Reordered stages: %s", ", ".join(payload.stage_ids))
        self._invalidate(PIPELINE_VIEW, MEMBERS_VIEW)
        return await self.repository.list()

    @domain_operation("Could not seed the stages")
    async def seed_default_stages(self) -> List[Stage]:
        """Upsert DEFAULT_STAGES by id; other stages are left alone."""
        for stage_id, name, order in DEFAULT_STAGES:
            stage = await self.repository.get_by_id(stage_id)
            if stage is None:
                await self.repository.create(stage_id, name, order)
            else:
                stage.name = name
                await self.repository.set_order(stage, order)

        await self.db.flush()
        await self.db.commit()
        self._invalidate(PIPELINE_VIEW)
        return await self.repository.list()
