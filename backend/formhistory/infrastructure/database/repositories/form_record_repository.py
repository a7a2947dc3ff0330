"""Concrete repository implementation for FormRecord backed by SQLAlchemy."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from formhistory.application.interfaces import FormRecordRepository
from formhistory.domain.entities import FormRecord
from formhistory.infrastructure.database.models import FormRecordModel


class SQLAlchemyFormRecordRepository(FormRecordRepository):
    """Implements the FormRecordRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: FormRecordModel) -> FormRecord:
        """Map ORM model → domain entity."""
        return FormRecord(
            id=model.id,
            current_version=model.current_version,
            patient_form_data=model.patient_form_data,
            case_id=model.case_id,
            consultation_id=model.consultation_id,
            form_template_id=model.form_template_id,
            completion_time_seconds=model.completion_time_seconds,
            deleted_at=model.deleted_at,
            deleted_by=model.deleted_by,
            deletion_reason=model.deletion_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: FormRecord) -> FormRecordModel:
        """Map domain entity → ORM model (for creation)."""
        return FormRecordModel(
            id=entity.id,
            current_version=entity.current_version,
            patient_form_data=entity.patient_form_data,
            case_id=entity.case_id,
            consultation_id=entity.consultation_id,
            form_template_id=entity.form_template_id,
            completion_time_seconds=entity.completion_time_seconds,
            deleted_at=entity.deleted_at,
            deleted_by=entity.deleted_by,
            deletion_reason=entity.deletion_reason,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def get_by_id(self, form_id: str) -> FormRecord | None:
        result = await self._session.get(FormRecordModel, form_id)
        return self._to_entity(result) if result else None

    async def get_all(
        self,
        *,
        include_deleted: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> list[FormRecord]:
        stmt = select(FormRecordModel)
        if not include_deleted:
            stmt = stmt.where(FormRecordModel.deleted_at.is_(None))

        stmt = stmt.offset(skip).limit(limit).order_by(
            FormRecordModel.created_at.desc()
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def get_deleted(self, *, skip: int = 0, limit: int = 100) -> list[FormRecord]:
        stmt = (
            select(FormRecordModel)
            .where(FormRecordModel.deleted_at.is_not(None))
            .order_by(FormRecordModel.deleted_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, record: FormRecord) -> FormRecord:
        model = self._to_model(record)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(
        self, record: FormRecord, *, expected_version: int
    ) -> FormRecord | None:
        # Compare-and-set on current_version: a concurrent writer that already
        # advanced the counter makes this match zero rows.
        stmt = (
            update(FormRecordModel)
            .where(
                FormRecordModel.id == record.id,
                FormRecordModel.current_version == expected_version,
            )
            .values(
                current_version=record.current_version,
                patient_form_data=record.patient_form_data,
                case_id=record.case_id,
                consultation_id=record.consultation_id,
                form_template_id=record.form_template_id,
                completion_time_seconds=record.completion_time_seconds,
                deleted_at=record.deleted_at,
                deleted_by=record.deleted_by,
                deletion_reason=record.deletion_reason,
                updated_at=record.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None

        model = await self._session.get(
            FormRecordModel, record.id, populate_existing=True
        )
        return self._to_entity(model) if model else None
