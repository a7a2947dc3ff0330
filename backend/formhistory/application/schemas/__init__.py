from .form_record import (
    FormRecordCreate,
    FormRecordUpdate,
    FormRecordSoftDelete,
    FormRecordResponse,
)
from .form_version import (
    FormVersionSummaryResponse,
    FormVersionDetailResponse,
    VersionSnapshotViewResponse,
    VersionComparisonResponse,
    RestoreVersionRequest,
)

__all__ = [
    "FormRecordCreate",
    "FormRecordUpdate",
    "FormRecordSoftDelete",
    "FormRecordResponse",
    "FormVersionSummaryResponse",
    "FormVersionDetailResponse",
    "VersionSnapshotViewResponse",
    "VersionComparisonResponse",
    "RestoreVersionRequest",
]
