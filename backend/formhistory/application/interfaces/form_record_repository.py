"""Abstract repository interface (port) for FormRecord persistence."""

from abc import ABC, abstractmethod

from formhistory.domain.entities import FormRecord


class FormRecordRepository(ABC):
    """Port for the mutable record head — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, form_id: str) -> FormRecord | None:
        """Retrieve a single record by its UUID, soft-deleted or not."""
        ...

    @abstractmethod
    async def get_all(
        self,
        *,
        include_deleted: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> list[FormRecord]:
        """Retrieve a paginated list of records, newest first."""
        ...

    @abstractmethod
    async def get_deleted(self, *, skip: int = 0, limit: int = 100) -> list[FormRecord]:
        """Retrieve soft-deleted records only."""
        ...

    @abstractmethod
    async def create(self, record: FormRecord) -> FormRecord:
        """Persist a new record and return it."""
        ...

    @abstractmethod
    async def update(
        self, record: FormRecord, *, expected_version: int
    ) -> FormRecord | None:
        """Conditionally write the record.

        The write only applies when the stored ``current_version`` still
        equals ``expected_version``. Returns None when it does not (another
        writer got there first) or when the record no longer exists.
        """
        ...
