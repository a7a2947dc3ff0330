"""Unit tests for the FormRecordService: updates, restorations and their snapshots."""

import pytest

from formhistory.application.schemas import FormRecordCreate, FormRecordUpdate
from formhistory.application.services import FormRecordService, FormVersionService
from formhistory.domain.exceptions import (
    EntityNotFoundError,
    InvalidVersionError,
    MissingActorError,
    VersionConflictError,
    VersionNotFoundError,
)
from tests.unit.fakes import FakeFormRecordRepository, FakeFormVersionRepository


@pytest.fixture
def versions() -> FakeFormVersionRepository:
    return FakeFormVersionRepository()


@pytest.fixture
def records() -> FakeFormRecordRepository:
    return FakeFormRecordRepository()


@pytest.fixture
def version_service(versions, records) -> FormVersionService:
    return FormVersionService(version_repository=versions, record_repository=records)


@pytest.fixture
def service(records, version_service) -> FormRecordService:
    return FormRecordService(repository=records, version_service=version_service)


async def _create(service: FormRecordService, payload: dict | None = None):
    return await service.create_record(
        FormRecordCreate(patient_form_data=payload, case_id="case-1")
    )


async def _update(service: FormRecordService, form_id: str, payload: dict, user="user-1", notes=None):
    return await service.update_record(
        form_id, FormRecordUpdate(patient_form_data=payload, change_notes=notes), user
    )


# ── Create / read ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_starts_at_version_one(service, version_service):
    record = await _create(service, {"q1": 0})
    assert record.current_version == 1
    assert await version_service.get_version_history(record.id) == []


@pytest.mark.asyncio
async def test_get_missing_record_raises(service):
    with pytest.raises(EntityNotFoundError):
        await service.get_record("missing")


# ── Update ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_update_snapshots_previous_payload(service, version_service):
    record = await _create(service, {"q1": 0})

    updated = await _update(service, record.id, {"q1": 1}, notes="answered q1")

    assert updated.current_version == 2
    assert updated.patient_form_data == {"q1": 1}
    snapshot = await version_service.get_version(record.id, 1)
    assert snapshot.raw_data == {"q1": 0}
    assert snapshot.changed_by == "user-1"
    assert snapshot.change_notes == "answered q1"


@pytest.mark.asyncio
async def test_update_with_identical_payload_does_not_version(service, versions):
    record = await _create(service, {"q1": 0})

    updated = await _update(service, record.id, {"q1": 0})

    assert updated.current_version == 1
    assert versions.upsert_calls == 0


@pytest.mark.asyncio
async def test_reference_only_update_does_not_version(service, versions):
    record = await _create(service, {"q1": 0})

    updated = await service.update_record(
        record.id, FormRecordUpdate(consultation_id="consult-9"), "user-1"
    )

    assert updated.consultation_id == "consult-9"
    assert updated.current_version == 1
    assert versions.upsert_calls == 0


@pytest.mark.asyncio
async def test_update_from_empty_payload_advances_without_snapshot(service, version_service):
    record = await _create(service)

    updated = await _update(service, record.id, {"q1": 1})

    assert updated.current_version == 2
    assert await version_service.get_version_history(record.id) == []


@pytest.mark.asyncio
async def test_update_requires_actor(service):
    record = await _create(service, {"q1": 0})
    with pytest.raises(MissingActorError):
        await _update(service, record.id, {"q1": 1}, user=None)


@pytest.mark.asyncio
async def test_update_detects_concurrent_writer(service, records, versions):
    record = await _create(service, {"q1": 0})
    stale = await service.get_record(record.id)

    async def _concurrent_get(form_id):
        records.bump_version_behind_our_back(form_id)
        return stale

    service.get_record = _concurrent_get

    with pytest.raises(VersionConflictError):
        await _update(service, record.id, {"q1": 1})
    assert versions.upsert_calls == 0


@pytest.mark.asyncio
async def test_update_survives_snapshot_write_failure(service, versions, version_service):
    record = await _create(service, {"q1": 0})
    versions.fail_writes = True

    updated = await _update(service, record.id, {"q1": 1})

    assert updated.current_version == 2
    assert updated.patient_form_data == {"q1": 1}
    assert await version_service.get_version_history(record.id) == []


@pytest.mark.asyncio
async def test_update_payload_is_not_shared_with_caller(service):
    record = await _create(service, {"q1": 0})
    payload = {"section": {"q1": 1}}

    await _update(service, record.id, payload)
    payload["section"]["q1"] = 42

    stored = await service.get_record(record.id)
    assert stored.patient_form_data == {"section": {"q1": 1}}


@pytest.mark.asyncio
async def test_update_computes_completion_time(service):
    record = await _create(service, {"fillStatus": "draft"})

    updated = await _update(
        service,
        record.id,
        {
            "fillStatus": "completed",
            "beginFill": "2024-05-01T10:00:00Z",
            "completedAt": "2024-05-01T10:07:30Z",
        },
    )

    assert updated.completion_time_seconds == 450
    assert updated.fill_status == "completed"


# ── Restore ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_restore_scenario_produces_forward_history(service, version_service):
    record = await _create(service, {"q1": 0})
    await _update(service, record.id, {"q1": 1})
    current = await _update(service, record.id, {"q1": 2})
    assert current.current_version == 3

    restored = await service.restore_version(record.id, 2, "user-2")

    assert restored.current_version == 4
    assert restored.patient_form_data == {"q1": 1}

    marker = await version_service.get_version(record.id, 3)
    assert marker.raw_data == {"q1": 2}
    assert marker.is_restoration is True
    assert marker.restored_from_version == 2
    assert marker.changed_by == "user-2"
    assert marker.change_notes.startswith("Restored from version 2 (")

    history = await version_service.get_version_history(record.id)
    assert [v.version for v in history] == [3, 2, 1]

    head = await version_service.get_version(record.id, 4)
    assert head.raw_data == {"q1": 1}
    assert head.is_live_head

    changes = await version_service.get_change_list(record.id, 1, 3)
    assert [c.version for c in changes] == [1, 2, 3]


@pytest.mark.asyncio
async def test_restore_uses_caller_note(service, version_service):
    record = await _create(service, {"q1": 0})
    await _update(service, record.id, {"q1": 1})

    await service.restore_version(record.id, 1, "user-1", change_notes="undo typo")

    marker = await version_service.get_version(record.id, 2)
    assert marker.change_notes == "undo typo"


@pytest.mark.asyncio
async def test_restore_unknown_version_leaves_record_untouched(service):
    record = await _create(service, {"q1": 0})
    await _update(service, record.id, {"q1": 1})

    with pytest.raises(VersionNotFoundError):
        await service.restore_version(record.id, 7, "user-1")

    stored = await service.get_record(record.id)
    assert stored.current_version == 2
    assert stored.patient_form_data == {"q1": 1}


@pytest.mark.asyncio
async def test_restore_rejects_invalid_version(service):
    record = await _create(service, {"q1": 0})
    with pytest.raises(InvalidVersionError):
        await service.restore_version(record.id, "0", "user-1")


@pytest.mark.asyncio
async def test_restore_requires_actor(service):
    record = await _create(service, {"q1": 0})
    with pytest.raises(MissingActorError):
        await service.restore_version(record.id, 1, "")


@pytest.mark.asyncio
async def test_restore_survives_snapshot_write_failure(service, versions):
    record = await _create(service, {"q1": 0})
    await _update(service, record.id, {"q1": 1})
    versions.fail_writes = True

    restored = await service.restore_version(record.id, 1, "user-1")

    assert restored.current_version == 3
    assert restored.patient_form_data == {"q1": 0}


@pytest.mark.asyncio
async def test_restored_payload_is_independent_of_snapshot(service, version_service):
    record = await _create(service, {"section": {"q1": 0}})
    await _update(service, record.id, {"section": {"q1": 1}})

    restored = await service.restore_version(record.id, 1, "user-1")
    restored.patient_form_data["section"]["q1"] = 99

    snapshot = await version_service.get_version(record.id, 1)
    assert snapshot.raw_data == {"section": {"q1": 0}}


# ── Soft delete ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_soft_delete_keeps_history(service, version_service):
    record = await _create(service, {"q1": 0})
    await _update(service, record.id, {"q1": 1})

    deleted = await service.soft_delete_record(record.id, "user-1", "duplicate")

    assert deleted.is_deleted
    assert deleted.deletion_reason == "duplicate"
    assert await service.list_records() == []
    assert [r.id for r in await service.list_deleted_records()] == [record.id]
    assert len(await version_service.get_version_history(record.id)) == 1


@pytest.mark.asyncio
async def test_undelete_clears_flags(service):
    record = await _create(service, {"q1": 0})
    await service.soft_delete_record(record.id, "user-1")

    restored = await service.undelete_record(record.id)

    assert not restored.is_deleted
    assert restored.deleted_by is None


@pytest.mark.asyncio
async def test_soft_delete_requires_actor(service):
    record = await _create(service, {"q1": 0})
    with pytest.raises(MissingActorError):
        await service.soft_delete_record(record.id, None)
