"""Pydantic DTOs for form version history, comparison and restoration."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class FormVersionSummaryResponse(BaseModel):
    """Version list entry without the payload."""

    form_id: str
    version: int
    changed_by: str
    changed_at: datetime
    change_notes: str
    is_restoration: bool
    restored_from_version: int | None = None

    model_config = {"from_attributes": True}


class FormVersionDetailResponse(FormVersionSummaryResponse):
    """A single version including the full payload."""

    raw_data: dict[str, Any]


class VersionSnapshotViewResponse(BaseModel):
    version: int
    changed_by: str
    changed_at: datetime
    change_notes: str
    raw_data: dict[str, Any]

    model_config = {"from_attributes": True}


class VersionComparisonResponse(BaseModel):
    """Both sides of a diff request; the client computes the structural diff."""

    form_id: str
    v1: VersionSnapshotViewResponse
    v2: VersionSnapshotViewResponse

    model_config = {"from_attributes": True}


class RestoreVersionRequest(BaseModel):
    """Optional override for the auto-generated restoration note."""

    change_notes: str | None = Field(None, max_length=1000)
