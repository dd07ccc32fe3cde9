"""
Schemas package.

Import all schemas here for easy access.
"""

from app.schemas.user import UserCreate, UserRead, LoginRequest
from app.schemas.stage import StageData, StageReorder, StageRead, StageSummary, StageWithCount
from app.schemas.referral import ReferralData, ReferralRead
from app.schemas.member import (
    ApplicationSubmission,
    HireInfo,
    MemberCreate,
    MemberDetail,
    MemberProfile,
    MemberRead,
    MemberUpdate,
    PipelineColumn,
    StageTransition,
)
from app.schemas.member_import import ImportFailure, ImportRequest, ImportResult

__all__ = [
    "UserCreate",
    "UserRead",
    "LoginRequest",
    "StageData",
    "StageReorder",
    "StageRead",
    "StageSummary",
    "StageWithCount",
    "ReferralData",
    "ReferralRead",
    "ApplicationSubmission",
    "HireInfo",
    "MemberCreate",
    "MemberDetail",
    "MemberProfile",
    "MemberRead",
    "MemberUpdate",
    "PipelineColumn",
    "StageTransition",
    "ImportFailure",
    "ImportRequest",
    "ImportResult",
]
