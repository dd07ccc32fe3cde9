"""
Member model.

Represents a candidate tracked through the recruiting pipeline.
"""

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base_model import TimestampedModel
from app.models.enums import Area

if TYPE_CHECKING:
    from app.models.referral import Referral
    from app.models.stage import Stage


@dataclass(frozen=True)
class AreaSelection:
    """Either a known area or the free text typed when the area is OTHER."""

    known: Optional[Area] = None
    other: Optional[str] = None

    @property
    def is_other(self) -> bool:
        return self.known is None

    @property
    def label(self) -> str:
        if self.known is not None:
            return self.known.value.title()
        return self.other or "Other"


class Member(TimestampedModel):
    """
    Member table - a candidate in the pipeline.

    Contains the profile submitted with the application, the résumé URL,
    the current stage and, once placed, the hire outcome.
    """

    __tablename__ = "member"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Profile
    full_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Uniqueness is case-sensitive and enforced by the database
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    whatsapp: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="",
    )

    linkedin_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="",
    )

    area: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=Area.OTHER.value,
    )

    # Free text used only when area is OTHER
    other_area: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    current_role: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
    )

    years_experience: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    english_level: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    work_preference: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    willing_to_relocate: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    # Public URL of the uploaded résumé; empty until uploaded
    cv_file_url: Mapped[str] = mapped_column(
        String(1000),
        nullable=False,
        default="",
    )

    # Pipeline linkage
    stage_id: Mapped[str] = mapped_column(
        String(60),
        ForeignKey("stage.id"),
        nullable=False,
        index=True,
    )

    # Hire outcome, set when moved to the hired stage
    hired_company: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    hired_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    hired_salary_usd: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    stage: Mapped["Stage"] = relationship(
        "Stage",
        back_populates="members",
        lazy="selectin",
    )

    # Loaded explicitly on the detail view; rows go away with the member
    referrals: Mapped[List["Referral"]] = relationship(
        "Referral",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    @property
    def area_selection(self) -> AreaSelection:
        try:
            known = Area(self.area)
        except ValueError:
            return AreaSelection(other=self.area)
        if known is Area.OTHER:
            return AreaSelection(other=self.other_area)
        return AreaSelection(known=known)

    @property
    def is_hired(self) -> bool:
        return self.hired_company is not None
