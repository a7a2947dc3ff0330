from .form_record_repository import FormRecordRepository
from .form_version_repository import FormVersionRepository

__all__ = [
    "FormRecordRepository",
    "FormVersionRepository",
]
