"""Domain entities for form version history (snapshots and their projections)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from formhistory.domain.exceptions import InvalidVersionError

# changed_by marker for pseudo-snapshots synthesized from the live record
CURRENT_RECORD_ACTOR = "current-record"
CURRENT_RECORD_NOTE = "Current record state"


def parse_version_number(raw: Any, label: str = "version") -> int:
    """Validate a version number coming from a path or query string.

    Accepts positive ints and strings of digits only; anything else raises
    InvalidVersionError before any storage access happens.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidVersionError(label, raw, "is required")
    if isinstance(raw, bool):
        raise InvalidVersionError(label, raw, "must be a positive integer")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdecimal():
        # ASCII digits only
        value = int(raw.strip())
    else:
        raise InvalidVersionError(label, raw, "must be a positive integer")
    if value <= 0:
        raise InvalidVersionError(label, raw, "must be a positive integer")
    return value


@dataclass
class FormVersion:
    """Immutable snapshot of a form's payload at one version number."""

    form_id: str
    version: int
    raw_data: dict[str, Any]
    changed_by: str
    change_notes: str = ""
    is_restoration: bool = False
    restored_from_version: int | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    changed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_live_head(self) -> bool:
        """True for a pseudo-snapshot synthesized from the current record."""
        return self.changed_by == CURRENT_RECORD_ACTOR


@dataclass
class FormVersionSummary:
    """Metadata-only projection of a FormVersion — no payload."""

    form_id: str
    version: int
    changed_by: str
    changed_at: datetime
    change_notes: str
    is_restoration: bool
    restored_from_version: int | None
    id: str | None = None


@dataclass
class VersionSnapshotView:
    """One fully resolved side of a version comparison."""

    version: int
    changed_by: str
    changed_at: datetime
    change_notes: str
    raw_data: dict[str, Any]

    @classmethod
    def from_version(cls, version: FormVersion) -> "VersionSnapshotView":
        return cls(
            version=version.version,
            changed_by=version.changed_by,
            changed_at=version.changed_at,
            change_notes=version.change_notes,
            raw_data=version.raw_data,
        )


@dataclass
class VersionComparison:
    """Two resolved snapshots, labelled exactly as the caller asked for them."""

    form_id: str
    v1: VersionSnapshotView
    v2: VersionSnapshotView


@dataclass
class RestorePlan:
    """The snapshot to restore plus the default audit note for it."""

    version_data: FormVersion
    restoration_note: str
