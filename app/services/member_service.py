"""
Member business logic service.

Every public method returns an OperationResult; see app.services.operation.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings as default_settings, Settings
from app.errors import (
    ConfigurationError,
    DuplicateMember,
    NotFound,
    StoreFailure,
    ValidationFailed,
)
from app.models.member import Member
from app.models.stage import Stage
from app.repositories.member_repository import MemberRepository
from app.repositories.stage_repository import StageRepository
from app.schemas.base import column_values
from app.schemas.member import (
    ApplicationSubmission,
    HireInfo,
    MemberCreate,
    MemberUpdate,
)
from app.services.file_storage import FileStorage, StorageError
from app.services.operation import domain_operation
from app.services.stage_transition import (
    TransitionPolicy,
    build_transition_policy,
    is_hired_stage,
)
from app.services.view_invalidation import (
    MEMBERS_VIEW,
    PIPELINE_VIEW,
    ViewInvalidator,
    member_view,
)

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A member with this email already exists"
NO_STAGES_MESSAGE = "Configuration error: no pipeline stages are defined"


def _coerce(schema: type[BaseModel], data: Union[BaseModel, Dict[str, Any]]):
    """Accept either a validated schema or raw input; validation errors stay inside the boundary."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    return schema.model_validate(data)


class MemberService:
    """Service for member lifecycle operations and stage transitions."""

    def __init__(
        self,
        db: AsyncSession,
        storage: Optional[FileStorage] = None,
        views: Optional[ViewInvalidator] = None,
        settings: Settings = default_settings,
        transition_policy: Optional[TransitionPolicy] = None,
    ):
        self.db = db
        self.repository = MemberRepository(db)
        self.stage_repository = StageRepository(db)
        self.storage = storage
        self.views = views
        self.settings = settings
        self.transition_policy = transition_policy or build_transition_policy(settings)

    def _invalidate(self, *views: str) -> None:
        if self.views is not None:
            self.views.invalidate(*views)

    async def _intake_stage(self) -> Stage:
        stage = await self.stage_repository.get_intake()
        if stage is None:
            raise ConfigurationError(NO_STAGES_MESSAGE)
        return stage

    async def _insert(self, fields: Dict[str, Any]) -> Member:
        """Duplicate check, intake assignment, insert, commit."""
        if await self.repository.get_by_email(fields["email"]):
            raise DuplicateMember(DUPLICATE_EMAIL_MESSAGE)

        intake = await self._intake_stage()
        try:
            member = await self.repository.create(column_values(fields), intake.id)
        except IntegrityError as exc:
            # Lost a race against a concurrent create with the same email
            raise DuplicateMember(DUPLICATE_EMAIL_MESSAGE) from exc

        await self.db.commit()
        logger.info("Created member %s in stage %s", member.id, intake.id)
        self._invalidate(MEMBERS_VIEW, PIPELINE_VIEW)
        return member

    @domain_operation("Could not create the member. Please try again.")
    async def create_member(self, data: Union[MemberCreate, Dict[str, Any]]) -> Member:
        """Create a member in the intake stage (order 1)."""
        payload = _coerce(MemberCreate, data)
        return await self._insert(payload.model_dump())

    @domain_operation("Internal server error")
    async def submit_application(self, data: Union[ApplicationSubmission, Dict[str, Any]]) -> Member:
        """Public application form: same rules as create, no staff-only fields."""
        payload = _coerce(ApplicationSubmission, data)
        return await self._insert(payload.model_dump())

    @domain_operation("Could not load the member")
    async def get_member(self, member_id: UUID) -> Member:
        """Member with its stage and its referrals, newest referral first."""
        member = await self.repository.get_with_referrals(member_id)
        if member is None:
            raise NotFound("Member not found")
        return member

    @domain_operation("Could not load the members")
    async def list_members(self, search: Optional[str] = None) -> List[Member]:
        search = search.strip() if search else None
        return await self.repository.list(search=search or None)

    @domain_operation("Could not update the member")
    async def update_member(
        self,
        member_id: UUID,
        data: Union[MemberUpdate, Dict[str, Any]],
    ) -> Member:
        """Partial update; never changes the stage."""
        payload = _coerce(MemberUpdate, data)
        changes = payload.model_dump(exclude_unset=True)

        member = await self.repository.get_by_id(member_id)
        if member is None:
            raise NotFound("Member not found")

        new_email = changes.get("email")
        if new_email is not None and new_email != member.email:
            if await self.repository.get_by_email(new_email):
                raise DuplicateMember(DUPLICATE_EMAIL_MESSAGE)

        try:
            member = await self.repository.update(member, column_values(changes))
        except IntegrityError as exc:
            raise DuplicateMember(DUPLICATE_EMAIL_MESSAGE) from exc

        await self.db.commit()
        self._invalidate(MEMBERS_VIEW, PIPELINE_VIEW, member_view(member.id))
        return member

    @domain_operation("Could not update the stage")
    async def move_to_stage(
        self,
        member_id: UUID,
        stage_id: str,
        hire_info: Optional[Union[HireInfo, Dict[str, Any]]] = None,
    ) -> Member:
        """
        Move a member to another stage.

        Hire info is stored when given; it is not required here even when the
        destination is the hired stage (the board prompts for it beforehand).
        """
        hire = _coerce(HireInfo, hire_info) if hire_info is not None else None

        member = await self.repository.get_by_id(member_id)
        if member is None:
            raise NotFound("Member not found")

        stage = await self.stage_repository.get_by_id(stage_id)
        if stage is None:
            raise NotFound("Stage not found")

        if not self.transition_policy.allows(member.stage_id, stage.id):
            raise ValidationFailed(
                f"Moving from {member.stage_id} to {stage.id} is not allowed",
                {"from_stage_id": member.stage_id, "to_stage_id": stage.id},
            )

        changes: Dict[str, Any] = {"stage_id": stage.id}
        if hire is not None:
            changes.update(hire.model_dump())
        elif is_hired_stage(stage, self.settings):
            logger.info("Member %s moved to hired stage without hire info", member.id)

        previous_stage_id = member.stage_id
        member = await self.repository.update(member, changes)
        await self.db.commit()

        logger.info("Member %s moved %s -> %s", member.id, previous_stage_id, stage.id)
        self._invalidate(MEMBERS_VIEW, PIPELINE_VIEW, member_view(member.id))
        return member

    @domain_operation("Could not delete the member")
    async def delete_member(self, member_id: UUID) -> None:
        """Delete the résumé blob (per RESUME_DELETE_POLICY), then the member row."""
        member = await self.repository.get_by_id(member_id)
        if member is None:
            raise NotFound("Member not found")

        if member.cv_file_url and self.storage is not None:
            await self._delete_resume(member)

        await self.repository.delete(member)
        await self.db.commit()
        logger.info("Deleted member %s", member_id)
        self._invalidate(MEMBERS_VIEW, PIPELINE_VIEW, member_view(member_id))

    async def _delete_resume(self, member: Member) -> None:
        key = self.storage.key_from_url(member.cv_file_url)
        if not key:
            return
        try:
            await self.storage.delete(key)
        except StorageError as exc:
            if self.settings.RESUME_DELETE_POLICY == "strict":
                raise StoreFailure(
                    "Could not delete the résumé file; the member was not deleted"
                ) from exc
            logger.warning("Résumé %s for member %s was not deleted: %s", key, member.id, exc)
