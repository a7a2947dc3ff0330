"""SQLAlchemy ORM model for the FormRecord entity."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from formhistory.infrastructure.database.base import Base


class FormRecordModel(Base):
    """ORM model — maps to the 'form_records' table."""

    __tablename__ = "form_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    current_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    patient_form_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    case_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    consultation_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    form_template_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    completion_time_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    deletion_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_form_records_case", "case_id"),
        Index("ix_form_records_deleted_at", "deleted_at"),
    )

    def __repr__(self) -> str:
        return f"<FormRecordModel(id={self.id}, current_version={self.current_version})>"
