"""
Member Pydantic schemas.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from app.models.enums import Area, EnglishLevel, WorkPreference
from app.schemas.base import TimestampedRead, strip_or_none
from app.schemas.referral import ReferralRead
from app.schemas.stage import StageSummary


def _check_linkedin_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("Enter a valid URL")
    if "linkedin.com" not in value:
        raise ValueError("Must be a LinkedIn URL")
    return value


class MemberProfile(BaseModel):
    """Profile fields shared by staff-side create and the public application form."""

    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    whatsapp: str = Field(..., min_length=10, max_length=20)
    linkedin_url: str = Field(..., max_length=500)
    area: Area
    other_area: Optional[str] = Field(None, max_length=100)
    current_role: str = Field(..., min_length=2, max_length=100)
    years_experience: int = Field(..., ge=0, le=50)
    english_level: EnglishLevel
    location: str = Field(..., min_length=2, max_length=255)
    work_preference: WorkPreference
    willing_to_relocate: bool = False

    @field_validator("full_name", "email", "whatsapp", "linkedin_url", "current_role", "location", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("other_area", mode="before")
    @classmethod
    def blank_other_area(cls, value):
        return strip_or_none(value) if isinstance(value, str) else value

    @field_validator("linkedin_url")
    @classmethod
    def linkedin_only(cls, value: str) -> str:
        return _check_linkedin_url(value)

    @model_validator(mode="after")
    def other_area_only_for_other(self):
        # The free-text override only exists alongside Area.OTHER
        if self.area is not Area.OTHER:
            self.other_area = None
        return self


class MemberCreate(MemberProfile):
    """Schema for creating a member from the staff dashboard."""

    cv_file_url: str = ""
    notes: Optional[str] = None


class ApplicationSubmission(MemberProfile):
    """Fields posted by the public application form."""

    cv_file_url: str = ""


class HireInfo(BaseModel):
    """Hire outcome captured when a member moves to the hired stage."""

    hired_company: str = Field(..., min_length=1, max_length=255)
    hired_date: date
    hired_salary_usd: Decimal = Field(..., ge=0)

    @field_validator("hired_company", mode="before")
    @classmethod
    def strip_company(cls, value):
        return value.strip() if isinstance(value, str) else value


class StageTransition(BaseModel):
    """Request to move a member to another stage."""

    stage_id: str = Field(..., min_length=1)
    hire_info: Optional[HireInfo] = None


class MemberUpdate(BaseModel):
    """
    Partial update. All fields optional.

    Stage is not part of this schema; stage changes go through StageTransition.
    """

    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    whatsapp: Optional[str] = Field(None, max_length=20)
    linkedin_url: Optional[str] = Field(None, max_length=500)
    area: Optional[Area] = None
    other_area: Optional[str] = Field(None, max_length=100)
    current_role: Optional[str] = Field(None, max_length=100)
    years_experience: Optional[int] = Field(None, ge=0, le=50)
    english_level: Optional[EnglishLevel] = None
    location: Optional[str] = Field(None, max_length=255)
    work_preference: Optional[WorkPreference] = None
    willing_to_relocate: Optional[bool] = None
    cv_file_url: Optional[str] = None
    notes: Optional[str] = None
    hired_company: Optional[str] = Field(None, max_length=255)
    hired_date: Optional[date] = None
    hired_salary_usd: Optional[Decimal] = Field(None, ge=0)

    @field_validator("full_name", "whatsapp", "current_role", "location", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("linkedin_url")
    @classmethod
    def linkedin_only(cls, value: Optional[str]) -> Optional[str]:
        return _check_linkedin_url(value) if value else value

    @model_validator(mode="after")
    def other_area_only_for_other(self):
        if self.area is not None and self.area is not Area.OTHER:
            self.other_area = None
        return self


class MemberRead(TimestampedRead):
    """Schema for reading member data (API response)."""

    id: UUID
    full_name: str
    email: str
    whatsapp: str
    linkedin_url: str
    area: str
    other_area: Optional[str] = None
    current_role: str
    years_experience: int
    english_level: str
    location: Optional[str] = None
    work_preference: Optional[str] = None
    willing_to_relocate: bool
    cv_file_url: str
    stage_id: str
    stage: Optional[StageSummary] = None
    hired_company: Optional[str] = None
    hired_date: Optional[date] = None
    hired_salary_usd: Optional[Decimal] = None
    notes: Optional[str] = None


class MemberDetail(MemberRead):
    """Member with its referrals, newest referral first."""

    referrals: List[ReferralRead] = []


class PipelineColumn(BaseModel):
    """One board column: a stage with its members, most recently updated first."""

    id: str
    name: str
    order: int
    members: List[MemberRead] = []

    model_config = ConfigDict(from_attributes=True)
