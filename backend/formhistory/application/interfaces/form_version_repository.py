"""Abstract repository interface (port) for FormVersion snapshots."""

from abc import ABC, abstractmethod

from formhistory.domain.entities import FormVersion, FormVersionSummary


class FormVersionRepository(ABC):
    """Port for the snapshot store, keyed by (form_id, version)."""

    @abstractmethod
    async def get(self, form_id: str, version: int) -> FormVersion | None:
        """Retrieve the exact snapshot for (form_id, version), with payload."""
        ...

    @abstractmethod
    async def list_summaries(self, form_id: str) -> list[FormVersionSummary]:
        """All snapshots of a form, newest first, without payloads."""
        ...

    @abstractmethod
    async def list_summaries_in_range(
        self, form_id: str, low: int, high: int
    ) -> list[FormVersionSummary]:
        """Stored snapshots with low <= version <= high, ascending, without payloads."""
        ...

    @abstractmethod
    async def list_by_actor(
        self, changed_by: str, *, skip: int = 0, limit: int = 100
    ) -> list[FormVersionSummary]:
        """Snapshots written by one actor, most recent first."""
        ...

    @abstractmethod
    async def upsert(
        self, version: FormVersion, *, protect_restoration_sources: bool = True
    ) -> FormVersion:
        """Insert the snapshot or overwrite the row sharing its (form_id, version).

        With ``protect_restoration_sources``, an existing row that another
        snapshot names as its ``restored_from_version`` is left untouched and
        returned as is.
        """
        ...
