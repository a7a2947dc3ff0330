"""SQLAlchemy ORM model for FormVersion snapshots."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from formhistory.infrastructure.database.base import Base


class FormVersionModel(Base):
    """ORM model — maps to the 'form_versions' table.

    One row per (form_id, version); rows survive soft deletion of the form.
    """

    __tablename__ = "form_versions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    form_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("form_records.id"), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    raw_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    changed_by: Mapped[str] = mapped_column(String(255), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    change_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_restoration: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    restored_from_version: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("form_id", "version", name="uq_form_versions_form_version"),
    )

    def __repr__(self) -> str:
        return (
            f"<FormVersionModel(form_id={self.form_id}, version={self.version}, "
            f"restoration={self.is_restoration})>"
        )


# Descending indexes need the mapped attributes, so they are declared after the class.
Index(
    "ix_form_versions_form_version_desc",
    FormVersionModel.form_id,
    FormVersionModel.version.desc(),
)
Index(
    "ix_form_versions_changed_by_at",
    FormVersionModel.changed_by,
    FormVersionModel.changed_at.desc(),
)
