"""Custom exception hierarchy for buildledger."""


class BuildLedgerError(Exception):
    """Base exception for all buildledger errors."""


class EntityNotFoundError(BuildLedgerError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(BuildLedgerError):
    """Raised when an entity is in an invalid state for the operation."""


class InvalidStateError(InvalidEntityStateError):
    """Raised when a lifecycle transition is not allowed from the current status."""


class PermissionDeniedError(BuildLedgerError):
    """Raised when the actor lacks the permission a transition requires."""


class ValidationError(BuildLedgerError):
    """Raised when a required field is missing or invalid."""


class ConfigurationError(BuildLedgerError):
    """Raised when configuration is invalid or missing."""


class SinkError(BuildLedgerError):
    """Raised when a sink operation fails."""


class BackendError(BuildLedgerError):
    """Raised when the REST backend rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
