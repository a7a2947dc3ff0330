"""Pydantic DTOs (Data Transfer Objects) for the FormRecord feature."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class FormRecordCreate(BaseModel):
    """Schema for creating a new form record."""

    patient_form_data: dict[str, Any] | None = Field(
        None,
        examples=[{
            "rawFormData": {"standardfragebogen": {"q1": 1}},
            "fillStatus": "draft",
        }],
    )
    case_id: str | None = Field(None, max_length=36)
    consultation_id: str | None = Field(None, max_length=36)
    form_template_id: str | None = Field(None, max_length=36)


class FormRecordUpdate(BaseModel):
    """Schema for updating a form record — all fields optional."""

    patient_form_data: dict[str, Any] | None = None
    change_notes: str | None = Field(None, max_length=1000)
    case_id: str | None = Field(None, max_length=36)
    consultation_id: str | None = Field(None, max_length=36)
    form_template_id: str | None = Field(None, max_length=36)


class FormRecordSoftDelete(BaseModel):
    deletion_reason: str | None = Field(None, max_length=1000)


class FormRecordResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    current_version: int
    patient_form_data: dict[str, Any] | None
    fill_status: str
    case_id: str | None
    consultation_id: str | None
    form_template_id: str | None
    completion_time_seconds: int | None
    deleted_at: datetime | None
    deleted_by: str | None
    deletion_reason: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
