from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class CleaningOptions(BaseModel):
    remove_duplicates: bool = True
    trim_whitespace: bool = True
    standardize_case: bool = False
    remove_empty_rows: bool = True


class CleaningStats(BaseModel):
    duplicates_removed: int = 0
    whitespace_fixed: int = Field(default=0, description="Cells changed, not rows")
    empty_rows_removed: int = 0
    rows_before: int = 0
    rows_after: int = 0


class TablePreview(BaseModel):
    headers: List[str] = Field(default_factory=list)
    rows: List[List[Optional[str]]] = Field(default_factory=list)
    total_rows: int = 0
    truncated: bool = False
    search: Optional[str] = None


class SessionResponse(BaseModel):
    session_id: str
    file_name: str
    delimiter: str = Field(examples=[",", ";"])
    encoding: str = Field(default="utf-8")
    table: TablePreview
    stats: Optional[CleaningStats] = None


class CleanResponse(BaseModel):
    session_id: str
    stats: CleaningStats
    table: TablePreview


class HealthResponse(BaseModel):
    ok: bool = True
