"""
Stage model.

Represents one ordered step of the recruiting pipeline (e.g. Intake, Qualified, Hired).
"""

from typing import List, TYPE_CHECKING

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base_model import TimestampedModel

if TYPE_CHECKING:
    from app.models.member import Member


class Stage(TimestampedModel):
    """
    Stage table - a column of the pipeline board.

    The id is a slug of the name chosen at creation time and never changes.
    The order field (1-based) determines the display order; the stage with
    order 1 is the intake stage.
    """

    __tablename__ = "stage"

    id: Mapped[str] = mapped_column(
        String(60),
        primary_key=True,
    )

    # Human-readable name (e.g., "Qualified")
    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Position in the pipeline (1, 2, 3, etc.)
    order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )

    # Only loaded explicitly (board view); never lazy-loaded
    members: Mapped[List["Member"]] = relationship(
        "Member",
        back_populates="stage",
        passive_deletes="all",
        lazy="raise",
    )
