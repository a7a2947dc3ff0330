from .form_record import FormRecordModel
from .form_version import FormVersionModel

__all__ = [
    "FormRecordModel",
    "FormVersionModel",
]
