"""
Referral model.

Records that a member was put forward to a company.
"""

import uuid
from datetime import date
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base_model import TimestampedModel

if TYPE_CHECKING:
    from app.models.member import Member


class Referral(TimestampedModel):
    """Referral table - owned by exactly one member."""

    __tablename__ = "referral"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("member.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    company_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    referral_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    member: Mapped["Member"] = relationship(
        "Member",
        back_populates="referrals",
        lazy="raise",
    )
