"""Form version service — snapshot writes, history reads, comparison and restore preparation.

Every accepted change to a form's payload leaves behind an immutable
snapshot keyed by (form_id, version). This service:
- writes those snapshots (best effort, upsert by key)
- lists history and change ranges (metadata only)
- resolves single versions, falling back to the live record for the
  current version when no snapshot row exists
- prepares restorations of a stored version
"""

import copy
import logging

from formhistory.application.interfaces import FormRecordRepository, FormVersionRepository
from formhistory.domain.entities import (
    CURRENT_RECORD_ACTOR,
    CURRENT_RECORD_NOTE,
    FormRecord,
    FormVersion,
    FormVersionSummary,
    RestorePlan,
    VersionComparison,
    VersionSnapshotView,
    parse_version_number,
)
from formhistory.domain.exceptions import MissingActorError, VersionNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CHANGE_NOTE = "Form updated"


class FormVersionService:
    """Application service for form version history. Depends on repository ports (DI)."""

    def __init__(
        self,
        version_repository: FormVersionRepository,
        record_repository: FormRecordRepository,
        default_change_note: str = DEFAULT_CHANGE_NOTE,
    ):
        self._versions = version_repository
        self._records = record_repository
        self._default_change_note = default_change_note

    # ── Writer ───────────────────────────────────────────────────────

    async def create_version_backup(
        self,
        form: FormRecord,
        user_id: str,
        change_notes: str = "",
        is_restoration: bool = False,
        restored_from_version: int | None = None,
        version_override: int | None = None,
        raw_data_override: dict | None = None,
    ) -> FormVersion | None:
        """Persist a snapshot of ``form`` as it looked before the change being recorded.

        Returns None when there is nothing to snapshot or when the write
        fails; a lost snapshot must never abort the caller's update.
        """
        if not user_id:
            raise MissingActorError("version backup")

        raw_data = raw_data_override if raw_data_override is not None else form.patient_form_data
        if not raw_data:
            logger.debug("No patient form data to back up for form %s, skipping version", form.id)
            return None

        version_number = parse_version_number(
            version_override if version_override is not None else (form.current_version or 1)
        )

        snapshot = FormVersion(
            form_id=form.id,
            version=version_number,
            raw_data=copy.deepcopy(raw_data),
            changed_by=user_id,
            change_notes=change_notes or self._default_change_note,
            is_restoration=is_restoration,
            restored_from_version=restored_from_version if is_restoration else None,
        )

        try:
            stored = await self._versions.upsert(snapshot, protect_restoration_sources=True)
        except Exception:
            logger.exception(
                "AUDIT GAP: failed to write version %d of form %s (user=%s, restoration=%s)",
                version_number,
                form.id,
                user_id,
                is_restoration,
            )
            return None

        logger.info(
            "Form version backup created: form=%s version=%d user=%s restoration=%s",
            form.id,
            version_number,
            user_id,
            is_restoration,
        )
        return stored

    # ── Reader ───────────────────────────────────────────────────────

    async def get_version_history(self, form_id: str) -> list[FormVersionSummary]:
        return await self._versions.list_summaries(form_id)

    async def get_version(self, form_id: str, version_number: int | str) -> FormVersion:
        version = parse_version_number(version_number)
        snapshot = await self._resolve_snapshot(form_id, version)
        if snapshot is None:
            raise VersionNotFoundError(form_id, version)
        return snapshot

    async def compare_versions(
        self, form_id: str, v1: int | str | None, v2: int | str | None
    ) -> VersionComparison:
        """Resolve both versions independently; the caller computes the diff."""
        first = parse_version_number(v1, "v1")
        second = parse_version_number(v2, "v2")

        left = await self._resolve_snapshot(form_id, first)
        right = await self._resolve_snapshot(form_id, second)
        if left is None or right is None:
            raise VersionNotFoundError(form_id, (first, second))

        return VersionComparison(
            form_id=form_id,
            v1=VersionSnapshotView.from_version(left),
            v2=VersionSnapshotView.from_version(right),
        )

    async def get_change_list(
        self, form_id: str, v1: int | str | None, v2: int | str | None
    ) -> list[FormVersionSummary]:
        """Stored snapshots between v1 and v2 inclusive, oldest first. No live-head fallback."""
        first = parse_version_number(v1, "v1")
        second = parse_version_number(v2, "v2")
        return await self._versions.list_summaries_in_range(
            form_id, min(first, second), max(first, second)
        )

    async def get_versions_by_actor(
        self, user_id: str, skip: int = 0, limit: int = 100
    ) -> list[FormVersionSummary]:
        return await self._versions.list_by_actor(user_id, skip=skip, limit=limit)

    # ── Restoration ──────────────────────────────────────────────────

    async def prepare_restore(
        self, form_id: str, version_number: int | str, user_id: str
    ) -> RestorePlan:
        """Look up the exact snapshot to restore and build the default audit note.

        No live-head fallback: restoring the current state onto itself is
        meaningless.
        """
        if not user_id:
            raise MissingActorError("version restore")
        version = parse_version_number(version_number)

        snapshot = await self._versions.get(form_id, version)
        if snapshot is None:
            raise VersionNotFoundError(form_id, version)

        note = (
            f"Restored from version {version} "
            f"({snapshot.changed_at.strftime('%Y-%m-%d %H:%M:%S')})"
        )
        return RestorePlan(version_data=snapshot, restoration_note=note)

    # ── Internals ────────────────────────────────────────────────────

    async def _resolve_snapshot(self, form_id: str, version: int) -> FormVersion | None:
        """Exact snapshot, else a pseudo-snapshot of the live record at its current version."""
        snapshot = await self._versions.get(form_id, version)
        if snapshot is not None and snapshot.raw_data:
            return snapshot

        form = await self._records.get_by_id(form_id)
        if form is not None and form.current_version == version and form.patient_form_data:
            return FormVersion(
                form_id=form_id,
                version=version,
                raw_data=copy.deepcopy(form.patient_form_data),
                changed_by=CURRENT_RECORD_ACTOR,
                changed_at=form.updated_at or form.created_at,
                change_notes=CURRENT_RECORD_NOTE,
                is_restoration=False,
                restored_from_version=None,
            )
        return None
