"""Exception hierarchy for the consolidation pipeline.

All pipeline exceptions inherit from ConsolidationError, which carries an
error_code used by callers to map failures to user-facing responses.
None of these are fatal to the process; each one terminates a single call.
"""

from enum import Enum
from uuid import UUID


class ErrorCode(str, Enum):
    """Machine-readable error codes for pipeline failures."""

    NOT_FOUND = "NOT_FOUND"
    """A contact or group id could not be resolved."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    """Input was rejected before any write happened."""

    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
    """The repository rejected the write or was unreachable."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ConsolidationError(Exception):
    """Base exception for all pipeline errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ConsolidationError):
    """Raised when a referenced contact or group does not exist."""

    error_code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, entity_id: UUID) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ValidationFailedError(ConsolidationError):
    """Raised when a command is rejected before reaching storage."""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class PersistenceFailedError(ConsolidationError):
    """Raised when saving a contact fails.

    The previously stored contact remains authoritative.
    """

    error_code = ErrorCode.PERSISTENCE_FAILED

    def __init__(self, message: str, contact_id: UUID | None = None) -> None:
        super().__init__(message)
        self.contact_id = contact_id
