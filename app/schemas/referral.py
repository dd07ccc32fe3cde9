"""
Referral Pydantic schemas.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.base import TimestampedRead, strip_or_none


class ReferralData(BaseModel):
    """Schema for creating or updating a referral."""

    company_name: str = Field(..., min_length=1, max_length=255)
    referral_date: date
    notes: Optional[str] = None

    @field_validator("company_name", mode="before")
    @classmethod
    def strip_company(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, value):
        return strip_or_none(value) if isinstance(value, str) else value


class ReferralRead(TimestampedRead):
    """Schema for reading referral data (API response)."""

    id: UUID
    member_id: UUID
    company_name: str
    referral_date: date
    notes: Optional[str] = None
