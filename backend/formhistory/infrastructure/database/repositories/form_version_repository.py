"""Concrete repository implementation for FormVersion snapshots backed by SQLAlchemy."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from formhistory.application.interfaces import FormVersionRepository
from formhistory.domain.entities import FormVersion, FormVersionSummary
from formhistory.infrastructure.database.models import FormVersionModel

logger = logging.getLogger(__name__)

# Metadata-only projection: the raw_data column is never selected for lists.
_SUMMARY_COLUMNS = (
    FormVersionModel.id,
    FormVersionModel.form_id,
    FormVersionModel.version,
    FormVersionModel.changed_by,
    FormVersionModel.changed_at,
    FormVersionModel.change_notes,
    FormVersionModel.is_restoration,
    FormVersionModel.restored_from_version,
)


class SQLAlchemyFormVersionRepository(FormVersionRepository):
    """Implements the FormVersionRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, form_id: str, version: int) -> FormVersion | None:
        stmt = select(FormVersionModel).where(
            FormVersionModel.form_id == form_id,
            FormVersionModel.version == version,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_summaries(self, form_id: str) -> list[FormVersionSummary]:
        stmt = (
            select(*_SUMMARY_COLUMNS)
            .where(FormVersionModel.form_id == form_id)
            .order_by(FormVersionModel.version.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_summary(row) for row in result.all()]

    async def list_summaries_in_range(
        self, form_id: str, low: int, high: int
    ) -> list[FormVersionSummary]:
        stmt = (
            select(*_SUMMARY_COLUMNS)
            .where(
                FormVersionModel.form_id == form_id,
                FormVersionModel.version >= low,
                FormVersionModel.version <= high,
            )
            .order_by(FormVersionModel.version.asc())
        )
        result = await self._session.execute(stmt)
        return [self._to_summary(row) for row in result.all()]

    async def list_by_actor(
        self, changed_by: str, *, skip: int = 0, limit: int = 100
    ) -> list[FormVersionSummary]:
        stmt = (
            select(*_SUMMARY_COLUMNS)
            .where(FormVersionModel.changed_by == changed_by)
            .order_by(FormVersionModel.changed_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_summary(row) for row in result.all()]

    async def upsert(
        self, version: FormVersion, *, protect_restoration_sources: bool = True
    ) -> FormVersion:
        # SAVEPOINT around every statement of the write, lookups included: a
        # failure rolls back on its own and leaves the enclosing record update
        # intact, even on backends that abort the transaction on error.
        async with self._session.begin_nested():
            stmt = select(FormVersionModel).where(
                FormVersionModel.form_id == version.form_id,
                FormVersionModel.version == version.version,
            )
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model is None:
                model = self._to_model(version)
                self._session.add(model)
            elif protect_restoration_sources and await self._is_restoration_source(
                version.form_id, version.version
            ):
                logger.warning(
                    "Refusing to overwrite version %d of form %s: it is the source of a restoration",
                    version.version,
                    version.form_id,
                )
                return self._to_entity(model)
            else:
                logger.warning(
                    "Overwriting existing snapshot: form=%s version=%d",
                    version.form_id,
                    version.version,
                )
                model.raw_data = version.raw_data
                model.changed_by = version.changed_by
                model.changed_at = version.changed_at
                model.change_notes = version.change_notes
                model.is_restoration = version.is_restoration
                model.restored_from_version = version.restored_from_version
            await self._session.flush()

        return self._to_entity(model)

    async def _is_restoration_source(self, form_id: str, version: int) -> bool:
        stmt = (
            select(FormVersionModel.id)
            .where(
                FormVersionModel.form_id == form_id,
                FormVersionModel.is_restoration.is_(True),
                FormVersionModel.restored_from_version == version,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.first() is not None

    # ── Mapping ──────────────────────────────────────────────────────

    @staticmethod
    def _to_entity(model: FormVersionModel) -> FormVersion:
        return FormVersion(
            id=model.id,
            form_id=model.form_id,
            version=model.version,
            raw_data=model.raw_data,
            changed_by=model.changed_by,
            changed_at=model.changed_at,
            change_notes=model.change_notes,
            is_restoration=model.is_restoration,
            restored_from_version=model.restored_from_version,
        )

    @staticmethod
    def _to_model(entity: FormVersion) -> FormVersionModel:
        return FormVersionModel(
            id=entity.id,
            form_id=entity.form_id,
            version=entity.version,
            raw_data=entity.raw_data,
            changed_by=entity.changed_by,
            changed_at=entity.changed_at,
            change_notes=entity.change_notes,
            is_restoration=entity.is_restoration,
            restored_from_version=entity.restored_from_version,
        )

    @staticmethod
    def _to_summary(row) -> FormVersionSummary:
        return FormVersionSummary(
            id=row.id,
            form_id=row.form_id,
            version=row.version,
            changed_by=row.changed_by,
            changed_at=row.changed_at,
            change_notes=row.change_notes,
            is_restoration=row.is_restoration,
            restored_from_version=row.restored_from_version,
        )
