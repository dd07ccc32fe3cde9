"""
Base Pydantic schemas with common fields.

These are templates that other schemas inherit from.
"""

import enum
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class TimestampedRead(BaseModel):
    """
    Base schema for reading timestamped rows.

    Includes the auto-generated timestamp fields.
    """

    created_at: datetime
    updated_at: datetime

    # This tells Pydantic to work with SQLAlchemy models
    model_config = ConfigDict(from_attributes=True)


def column_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Unwrap enum members so dumped schemas can be assigned to string columns."""
    return {
        key: value.value if isinstance(value, enum.Enum) else value
        for key, value in data.items()
    }


def strip_or_none(value: Optional[str]) -> Optional[str]:
    """Trim strings coming from forms; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
