"""
Error family shared by every hub operation.

Callers branch on ``error.kind``; the subclasses only preset the kind so
raise sites stay readable.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    VERSION_CONFLICT = "version_conflict"
    COMMAND_APPLICATION = "command_application"
    INVARIANT_VIOLATION = "invariant_violation"
    STORAGE_FAILURE = "storage_failure"
    SOURCE_CONNECTOR = "source_connector"


class HubError(Exception):
    kind: ErrorKind = ErrorKind.STORAGE_FAILURE
    default_message = "Unexpected server error"

    def __init__(self, message: Optional[str] = None, **details):
        super().__init__(message or self.default_message)
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.kind.value, "message": str(self)}
        if self.details:
            body["details"] = self.details
        return body


class NotFound(HubError):
    # Also raised when access is masked, so existence is not leaked
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class AccessDenied(HubError):
    kind = ErrorKind.ACCESS_DENIED
    default_message = "Access denied"


class VersionConflict(HubError):
    kind = ErrorKind.VERSION_CONFLICT
    default_message = "Content version conflict"

    def __init__(self, expected: int, current: int):
        super().__init__(
            f"Expected base version {expected} but the current version is {current}",
            expected=expected,
            current=current,
        )
        self.expected = expected
        self.current = current


class CommandApplicationError(HubError):
    kind = ErrorKind.COMMAND_APPLICATION
    default_message = "Command could not be applied"


class InvariantViolation(HubError):
    kind = ErrorKind.INVARIANT_VIOLATION
    default_message = "Invariant violation"


class StorageFailure(HubError):
    kind = ErrorKind.STORAGE_FAILURE
    default_message = "Storage failure"


class SourceConnectorError(HubError):
    kind = ErrorKind.SOURCE_CONNECTOR
    default_message = "Source connector failure"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.VERSION_CONFLICT: 409,
    ErrorKind.COMMAND_APPLICATION: 422,
    ErrorKind.INVARIANT_VIOLATION: 400,
    ErrorKind.STORAGE_FAILURE: 500,
    ErrorKind.SOURCE_CONNECTOR: 502,
}
