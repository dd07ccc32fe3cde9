"""
Stage Pydantic schemas.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.base import TimestampedRead


class StageData(BaseModel):
    """Schema for creating or renaming a stage."""

    name: str = Field(..., min_length=1, max_length=50)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class StageReorder(BaseModel):
    """Desired left-to-right order of stage ids."""

    stage_ids: List[str] = Field(..., min_length=1)

    @field_validator("stage_ids")
    @classmethod
    def ids_unique(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("stage_ids must not contain duplicates")
        return value


class StageSummary(BaseModel):
    """Minimal stage info embedded in member responses."""

    id: str
    name: str
    order: int

    model_config = ConfigDict(from_attributes=True)


class StageRead(TimestampedRead):
    """Schema for reading stage data (API response)."""

    id: str
    name: str
    order: int


class StageWithCount(StageRead):
    member_count: int = 0
