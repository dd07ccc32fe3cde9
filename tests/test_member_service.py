"""
Member service tests against a temporary SQLite database.
"""

import asyncio
import uuid
from datetime import date
from decimal import Decimal

import pytest

from app.core.config import Settings
from app.errors import ErrorCode
from app.services.file_storage import StorageError
from app.services.member_service import DUPLICATE_EMAIL_MESSAGE, NO_STAGES_MESSAGE, MemberService
from app.services.stage_transition import AdjacencyTransitionPolicy
from app.services.view_invalidation import MEMBERS_VIEW, PIPELINE_VIEW, ViewInvalidator, member_view

from tests.conftest import member_payload

pytestmark = pytest.mark.db


class RecordingStorage:
    """Storage double that records deletes and can be told to fail them."""

    backend = "memory"

    def __init__(self, fail_delete: bool = False):
        self.fail_delete = fail_delete
        self.deleted = []

    async def upload(self, key, data, content_type):
        return self.public_url(key)

    async def delete(self, key):
        if self.fail_delete:
            raise StorageError("bucket unavailable")
        self.deleted.append(key)

    def public_url(self, key):
        return f"https://cdn.test/cvs/{key}"

    def key_from_url(self, url):
        return url.rstrip("/").rsplit("/", 1)[-1] or None

    async def aclose(self):
        return None


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.mark.asyncio
async def test_create_member_lands_in_intake_stage(db_session):
    views = ViewInvalidator()
    service = MemberService(db_session, views=views, settings=_settings())

    result = await service.create_member(member_payload())

    assert result.success
    member = result.data
    assert member.stage_id == "info-cargada"
    assert member.stage.name == "Info Cargada"
    assert member.hired_company is None
    assert member.cv_file_url == ""
    assert views.version(MEMBERS_VIEW) == 1
    assert views.version(PIPELINE_VIEW) == 1


@pytest.mark.asyncio
async def test_create_member_rejects_duplicate_email(db_session):
    service = MemberService(db_session, settings=_settings())
    assert (await service.create_member(member_payload())).success

    result = await service.create_member(member_payload(full_name="Other Person"))

    assert not result.success
    assert result.error_code is ErrorCode.CONFLICT
    assert result.error.message == DUPLICATE_EMAIL_MESSAGE
    assert len((await service.list_members()).data) == 1


@pytest.mark.asyncio
async def test_email_uniqueness_is_case_sensitive(db_session):
    service = MemberService(db_session, settings=_settings())
    assert (await service.create_member(member_payload(email="ana@example.com"))).success

    result = await service.create_member(member_payload(email="Ana@example.com"))

    assert result.success


@pytest.mark.asyncio
async def test_create_member_without_stages_is_configuration_error(empty_db_session):
    service = MemberService(empty_db_session, settings=_settings())

    result = await service.create_member(member_payload())

    assert result.error_code is ErrorCode.CONFIGURATION_ERROR
    assert result.error.message == NO_STAGES_MESSAGE


@pytest.mark.asyncio
async def test_create_member_validation_errors_are_returned(db_session):
    service = MemberService(db_session, settings=_settings())

    result = await service.create_member(
        member_payload(linkedin_url="https://example.com/ana", years_experience=51)
    )

    assert result.error_code is ErrorCode.VALIDATION_ERROR
    fields = result.error.details["fields"]
    assert "linkedin_url" in fields
    assert "years_experience" in fields


@pytest.mark.asyncio
async def test_other_area_is_dropped_unless_area_is_other(db_session):
    service = MemberService(db_session, settings=_settings())

    kept = await service.create_member(
        member_payload(email="o1@example.com", area="OTHER", other_area="Biotech")
    )
    dropped = await service.create_member(
        member_payload(email="o2@example.com", area="DESIGN", other_area="Biotech")
    )

    assert kept.data.other_area == "Biotech"
    assert dropped.data.other_area is None


@pytest.mark.asyncio
async def test_submit_application_creates_member(db_session):
    service = MemberService(db_session, settings=_settings())

    result = await service.submit_application(
        member_payload(cv_file_url="https://cdn.test/cvs/1700000000000-abc.pdf")
    )

    assert result.success
    assert result.data.stage_id == "info-cargada"
    assert result.data.cv_file_url.endswith(".pdf")


@pytest.mark.asyncio
async def test_list_members_search_matches_name_or_email(db_session):
    service = MemberService(db_session, settings=_settings())
    await service.create_member(member_payload(full_name="Ana Torres", email="ana@example.com"))
    await service.create_member(member_payload(full_name="Bruno Diaz", email="bruno@corp.io"))

    by_name = (await service.list_members("torres")).data
    by_email = (await service.list_members("CORP")).data
    everyone = (await service.list_members("  ")).data

    assert [m.email for m in by_name] == ["ana@example.com"]
    assert [m.email for m in by_email] == ["bruno@corp.io"]
    assert len(everyone) == 2


@pytest.mark.asyncio
async def test_list_members_search_treats_wildcards_literally(db_session):
    service = MemberService(db_session, settings=_settings())
    await service.create_member(member_payload(full_name="Ana Torres", email="ana@example.com"))
    await service.create_member(member_payload(full_name="Bob Stone", email="bob@example.com"))
    await service.create_member(member_payload(full_name="Carla Ruiz", email="carla_ruiz@example.com"))

    underscore = (await service.list_members("_")).data
    percent = (await service.list_members("%")).data
    literal = (await service.list_members("a_r")).data
    lookalike = (await service.list_members("aXr")).data

    assert [m.email for m in underscore] == ["carla_ruiz@example.com"]
    assert percent == []
    assert [m.email for m in literal] == ["carla_ruiz@example.com"]
    assert lookalike == []


@pytest.mark.asyncio
async def test_list_members_newest_first(db_session):
    service = MemberService(db_session, settings=_settings())
    await service.create_member(member_payload(email="first@example.com"))
    await asyncio.sleep(0.01)
    await service.create_member(member_payload(email="second@example.com"))

    members = (await service.list_members()).data

    assert [m.email for m in members] == ["second@example.com", "first@example.com"]


@pytest.mark.asyncio
async def test_get_member_not_found(db_session):
    service = MemberService(db_session, settings=_settings())

    result = await service.get_member(uuid.uuid4())

    assert result.error_code is ErrorCode.NOT_FOUND
    assert result.error.message == "Member not found"


@pytest.mark.asyncio
async def test_update_member_changes_only_given_fields(db_session):
    views = ViewInvalidator()
    service = MemberService(db_session, views=views, settings=_settings())
    created = (await service.create_member(member_payload())).data
    before = created.updated_at

    await asyncio.sleep(0.01)
    result = await service.update_member(created.id, {"current_role": "Tech Lead", "notes": "Strong"})

    assert result.success
    member = result.data
    assert member.current_role == "Tech Lead"
    assert member.notes == "Strong"
    assert member.full_name == "Ana Torres"
    assert member.stage_id == "info-cargada"
    assert member.updated_at > before
    assert views.version(member_view(created.id)) == 1


@pytest.mark.asyncio
async def test_update_member_to_taken_email_is_conflict(db_session):
    service = MemberService(db_session, settings=_settings())
    await service.create_member(member_payload(email="taken@example.com"))
    other = (await service.create_member(member_payload(email="free@example.com"))).data

    result = await service.update_member(other.id, {"email": "taken@example.com"})

    assert result.error_code is ErrorCode.CONFLICT
    reloaded = (await service.get_member(other.id)).data
    assert reloaded.email == "free@example.com"


@pytest.mark.asyncio
async def test_move_to_hired_stage_with_hire_info(db_session):
    service = MemberService(db_session, settings=_settings())
    member = (await service.create_member(member_payload())).data

    result = await service.move_to_stage(
        member.id,
        "contratado",
        {"hired_company": "Acme", "hired_date": "2026-03-01", "hired_salary_usd": "4500.50"},
    )

    assert result.success
    moved = result.data
    assert moved.stage_id == "contratado"
    assert moved.stage.name == "Contratado"
    assert moved.hired_company == "Acme"
    assert moved.hired_date == date(2026, 3, 1)
    assert moved.hired_salary_usd == Decimal("4500.50")


@pytest.mark.asyncio
async def test_move_without_hire_info_leaves_hire_fields_untouched(db_session):
    service = MemberService(db_session, settings=_settings())
    member = (await service.create_member(member_payload())).data

    result = await service.move_to_stage(member.id, "contratado")

    assert result.success
    assert result.data.stage_id == "contratado"
    assert result.data.hired_company is None
    assert result.data.hired_date is None
    assert result.data.hired_salary_usd is None


@pytest.mark.asyncio
async def test_move_to_unknown_stage_is_not_found(db_session):
    service = MemberService(db_session, settings=_settings())
    member = (await service.create_member(member_payload())).data

    result = await service.move_to_stage(member.id, "does-not-exist")

    assert result.error_code is ErrorCode.NOT_FOUND
    assert (await service.get_member(member.id)).data.stage_id == "info-cargada"


@pytest.mark.asyncio
async def test_move_rejects_transition_outside_adjacency_map(db_session):
    policy = AdjacencyTransitionPolicy({"info-cargada": ["calificado"]})
    service = MemberService(db_session, settings=_settings(), transition_policy=policy)
    member = (await service.create_member(member_payload())).data

    skipped = await service.move_to_stage(member.id, "contratado")
    allowed = await service.move_to_stage(member.id, "calificado")

    assert skipped.error_code is ErrorCode.VALIDATION_ERROR
    assert skipped.error.details == {"from_stage_id": "info-cargada", "to_stage_id": "contratado"}
    assert allowed.success


@pytest.mark.asyncio
async def test_delete_member_removes_resume_and_referrals(db_session):
    from app.services.referral_service import ReferralService

    storage = RecordingStorage()
    service = MemberService(db_session, storage=storage, settings=_settings())
    member = (
        await service.create_member(member_payload(cv_file_url="https://cdn.test/cvs/123-abc.pdf"))
    ).data
    await ReferralService(db_session).create_referral(
        member.id, {"company_name": "Acme", "referral_date": "2026-01-10"}
    )

    result = await service.delete_member(member.id)

    assert result.success
    assert storage.deleted == ["123-abc.pdf"]
    assert (await service.get_member(member.id)).error_code is ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_delete_member_best_effort_ignores_storage_failure(db_session):
    storage = RecordingStorage(fail_delete=True)
    service = MemberService(db_session, storage=storage, settings=_settings(RESUME_DELETE_POLICY="best_effort"))
    member = (
        await service.create_member(member_payload(cv_file_url="https://cdn.test/cvs/123-abc.pdf"))
    ).data

    result = await service.delete_member(member.id)

    assert result.success
    assert (await service.get_member(member.id)).error_code is ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_delete_member_strict_keeps_member_when_storage_fails(db_session):
    storage = RecordingStorage(fail_delete=True)
    service = MemberService(db_session, storage=storage, settings=_settings(RESUME_DELETE_POLICY="strict"))
    member = (
        await service.create_member(member_payload(cv_file_url="https://cdn.test/cvs/123-abc.pdf"))
    ).data

    result = await service.delete_member(member.id)

    assert result.error_code is ErrorCode.STORE_FAILURE
    assert (await service.get_member(member.id)).success
