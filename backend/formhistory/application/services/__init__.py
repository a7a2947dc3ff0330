from .form_version_service import FormVersionService
from .form_record_service import FormRecordService

__all__ = [
    "FormVersionService",
    "FormRecordService",
]
