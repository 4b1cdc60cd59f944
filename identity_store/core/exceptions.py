"""
Error taxonomy of the identity store.

Integrity checks are enforced by the database; these exceptions only give
callers a stable name for the failure once the engine has rejected a write.
"""

from typing import Any, Optional


class IdentityStoreError(Exception):
    """Base class for every error raised by the identity store."""


class ConstraintViolation(IdentityStoreError):
    """A write would duplicate a unique value or null a required column.

    The offending statement has already been rolled back when this is raised.
    """

    def __init__(self, message: str, constraint: Optional[str] = None):
        super().__init__(message)
        self.constraint = constraint


class NotFound(IdentityStoreError):
    def __init__(self, entity: str, key: str, value: Any):
        super().__init__(f"{entity} with {key}={value!r} not found")
        self.entity = entity
        self.key = key
        self.value = value


class MigrationApplyFailure(IdentityStoreError):
    """Schema statements failed against the target database.

    Fatal for a migration run: callers must abort instead of continuing with
    later revisions.
    """

    def __init__(self, revision: str, reason: str):
        super().__init__(f"Migration {revision} failed: {reason}")
        self.revision = revision
        self.reason = reason
