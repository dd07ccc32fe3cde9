"""
Base model with common fields.

Tables that carry timestamps inherit from this to get:
- created_at (when the record was created, never changed afterwards)
- updated_at (when the record was last modified)
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.utils.time import utc_now


class TimestampedModel(Base):
    """
    Abstract base class for timestamped models.

    This is not a real table - it's a template that other models inherit from.
    Timestamps are set in Python so every mutation gets a distinct value.
    """

    __abstract__ = True  # This means: don't create a table for this class

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
