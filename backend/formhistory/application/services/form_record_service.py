"""Application service (use case) for FormRecord operations, including version restore."""

import copy
import logging

from formhistory.application.interfaces import FormRecordRepository
from formhistory.application.schemas import FormRecordCreate, FormRecordUpdate
from formhistory.application.services.form_version_service import FormVersionService
from formhistory.domain.entities import FormRecord, parse_version_number
from formhistory.domain.exceptions import (
    EntityNotFoundError,
    MissingActorError,
    VersionConflictError,
)

logger = logging.getLogger(__name__)


class FormRecordService:
    """Orchestrates form record mutations and keeps the version history in step."""

    def __init__(
        self,
        repository: FormRecordRepository,
        version_service: FormVersionService,
    ):
        self._repository = repository
        self._versions = version_service

    async def get_record(self, form_id: str) -> FormRecord:
        record = await self._repository.get_by_id(form_id)
        if record is None:
            raise EntityNotFoundError("FormRecord", form_id)
        return record

    async def list_records(
        self,
        *,
        include_deleted: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> list[FormRecord]:
        return await self._repository.get_all(
            include_deleted=include_deleted, skip=skip, limit=limit
        )

    async def list_deleted_records(self, *, skip: int = 0, limit: int = 100) -> list[FormRecord]:
        return await self._repository.get_deleted(skip=skip, limit=limit)

    async def create_record(self, data: FormRecordCreate) -> FormRecord:
        record = FormRecord(
            patient_form_data=copy.deepcopy(data.patient_form_data),
            case_id=data.case_id,
            consultation_id=data.consultation_id,
            form_template_id=data.form_template_id,
        )
        return await self._repository.create(record)

    async def update_record(
        self, form_id: str, data: FormRecordUpdate, user_id: str | None
    ) -> FormRecord:
        """Apply an update; a changed payload advances the version and snapshots the old one."""
        if not user_id:
            raise MissingActorError("form update")

        record = await self.get_record(form_id)
        previous = copy.deepcopy(record)
        expected_version = record.current_version

        record.update_references(
            case_id=data.case_id,
            consultation_id=data.consultation_id,
            form_template_id=data.form_template_id,
        )

        payload_changed = (
            data.patient_form_data is not None
            and not record.has_same_payload(data.patient_form_data)
        )
        if payload_changed:
            record.replace_payload(data.patient_form_data)

        updated = await self._repository.update(record, expected_version=expected_version)
        if updated is None:
            raise VersionConflictError(form_id, expected_version)

        if payload_changed:
            await self._versions.create_version_backup(
                previous,
                user_id,
                data.change_notes or "",
                version_override=expected_version,
            )
            logger.info(
                "Form %s updated by %s: version %d -> %d",
                form_id,
                user_id,
                expected_version,
                updated.current_version,
            )
        return updated

    async def restore_version(
        self,
        form_id: str,
        version_number: int | str,
        user_id: str | None,
        change_notes: str | None = None,
    ) -> FormRecord:
        """Make a stored version the new head, as a forward-moving mutation.

        The state being replaced is snapshotted at the record's current
        version and tagged as a restoration of ``version_number``.
        """
        if not user_id:
            raise MissingActorError("version restore")
        target = parse_version_number(version_number)

        plan = await self._versions.prepare_restore(form_id, target, user_id)
        existing = await self.get_record(form_id)
        previous = copy.deepcopy(existing)
        expected_version = existing.current_version

        existing.replace_payload(plan.version_data.raw_data)
        updated = await self._repository.update(existing, expected_version=expected_version)
        if updated is None:
            raise VersionConflictError(form_id, expected_version)

        snapshot = await self._versions.create_version_backup(
            previous,
            user_id,
            change_notes or plan.restoration_note,
            is_restoration=True,
            restored_from_version=target,
            version_override=expected_version,
        )
        if snapshot is None:
            logger.warning(
                "Form %s restored to version %d without an audit snapshot of version %d",
                form_id,
                target,
                expected_version,
            )

        logger.info(
            "Form %s restored from version %d by %s (now version %d)",
            form_id,
            target,
            user_id,
            updated.current_version,
        )
        return updated

    async def soft_delete_record(
        self, form_id: str, user_id: str | None, reason: str | None = None
    ) -> FormRecord:
        """Flag the record as deleted. Snapshots are kept."""
        if not user_id:
            raise MissingActorError("form deletion")
        record = await self.get_record(form_id)
        record.soft_delete(user_id, reason)
        updated = await self._repository.update(record, expected_version=record.current_version)
        if updated is None:
            raise VersionConflictError(form_id, record.current_version)
        logger.info("Form %s soft deleted by %s", form_id, user_id)
        return updated

    async def undelete_record(self, form_id: str) -> FormRecord:
        record = await self.get_record(form_id)
        record.undelete()
        updated = await self._repository.update(record, expected_version=record.current_version)
        if updated is None:
            raise VersionConflictError(form_id, record.current_version)
        return updated
