"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class VersionNotFoundError(Exception):
    """Raised when a version (or one side of a comparison) cannot be resolved."""

    def __init__(self, form_id: str, versions: int | tuple[int, ...]):
        self.form_id = form_id
        self.versions = versions if isinstance(versions, tuple) else (versions,)
        if len(self.versions) == 1:
            message = f"Version {self.versions[0]} of form '{form_id}' not found"
        else:
            joined = ", ".join(str(v) for v in self.versions)
            message = f"One or both versions ({joined}) of form '{form_id}' not found"
        super().__init__(message)


class InvalidVersionError(ValueError):
    """Raised for missing, non-numeric or non-positive version numbers."""

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} '{value}': {reason}")


class MissingActorError(Exception):
    """Raised when a mutation or restoration has no authenticated actor id."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Authentication required: no user id supplied for {action}")


class VersionConflictError(Exception):
    """Raised when a conditional write finds the record at a different version.

    Another writer advanced ``current_version`` between our read and our
    write; the caller should reload the record and retry.
    """

    def __init__(self, form_id: str, expected_version: int):
        self.form_id = form_id
        self.expected_version = expected_version
        super().__init__(
            f"Form '{form_id}' was modified concurrently "
            f"(expected current version {expected_version})"
        )
