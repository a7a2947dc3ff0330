from .form_record_repository import SQLAlchemyFormRecordRepository
from .form_version_repository import SQLAlchemyFormVersionRepository

__all__ = [
    "SQLAlchemyFormRecordRepository",
    "SQLAlchemyFormVersionRepository",
]
