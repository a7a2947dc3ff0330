"""Domain entity — the mutable head of a versioned questionnaire submission."""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


def _parse_timestamp(value: Any) -> datetime | None:
    """Best-effort parse of an ISO timestamp stored inside the form payload."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class FormRecord:
    """A filled-in clinical questionnaire and its live version counter.

    ``patient_form_data`` is opaque to the versioning engine: a nested
    mapping of answer sections plus derived fields such as ``fillStatus``,
    ``beginFill`` and ``completedAt``.
    """

    patient_form_data: dict[str, Any] | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    current_version: int = 1
    case_id: str | None = None
    consultation_id: str | None = None
    form_template_id: str | None = None
    completion_time_seconds: int | None = None
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    deletion_reason: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def fill_status(self) -> str:
        if not self.patient_form_data:
            return "draft"
        return str(self.patient_form_data.get("fillStatus") or "draft")

    def has_same_payload(self, patient_form_data: dict[str, Any] | None) -> bool:
        return self.patient_form_data == patient_form_data

    def replace_payload(self, patient_form_data: dict[str, Any] | None) -> None:
        """Swap in a new payload and advance to the next version.

        The payload is deep-copied so the record never shares structure with
        a caller-owned dict or a stored snapshot.
        """
        self.patient_form_data = copy.deepcopy(patient_form_data)
        self.current_version = (self.current_version or 1) + 1
        self._refresh_completion_time()
        self.updated_at = datetime.now(timezone.utc)

    def update_references(
        self,
        case_id: str | None = None,
        consultation_id: str | None = None,
        form_template_id: str | None = None,
    ) -> None:
        """Update reference fields; these never advance the version."""
        if case_id is not None:
            self.case_id = case_id
        if consultation_id is not None:
            self.consultation_id = consultation_id
        if form_template_id is not None:
            self.form_template_id = form_template_id
        self.updated_at = datetime.now(timezone.utc)

    def soft_delete(self, deleted_by: str, reason: str | None = None) -> None:
        self.deleted_at = datetime.now(timezone.utc)
        self.deleted_by = deleted_by
        self.deletion_reason = reason
        self.updated_at = self.deleted_at

    def undelete(self) -> None:
        self.deleted_at = None
        self.deleted_by = None
        self.deletion_reason = None
        self.updated_at = datetime.now(timezone.utc)

    def _refresh_completion_time(self) -> None:
        data = self.patient_form_data or {}
        begin = _parse_timestamp(data.get("beginFill"))
        completed = _parse_timestamp(data.get("completedAt"))
        if begin is None or completed is None:
            return
        seconds = round((completed - begin).total_seconds())
        if seconds > 0:
            self.completion_time_seconds = seconds
