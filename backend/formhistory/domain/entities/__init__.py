from .form_record import FormRecord
from .form_version import (
    CURRENT_RECORD_ACTOR,
    CURRENT_RECORD_NOTE,
    FormVersion,
    FormVersionSummary,
    RestorePlan,
    VersionComparison,
    VersionSnapshotView,
    parse_version_number,
)

__all__ = [
    "FormRecord",
    "CURRENT_RECORD_ACTOR",
    "CURRENT_RECORD_NOTE",
    "FormVersion",
    "FormVersionSummary",
    "RestorePlan",
    "VersionComparison",
    "VersionSnapshotView",
    "parse_version_number",
]
