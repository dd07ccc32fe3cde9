"""
Schemas for bulk member import.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ImportRequest(BaseModel):
    """Rows already parsed from a spreadsheet, keyed by column header."""

    rows: List[Dict[str, Any]] = Field(default_factory=list)


class ImportFailure(BaseModel):
    """Why a single row could not be imported."""

    row: int
    email: Optional[str] = None
    reason: str


class ImportResult(BaseModel):
    total: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    failures: List[ImportFailure] = Field(default_factory=list)
