"""
Error taxonomy shared by the provider clients and the API layer.

Every collaborator failure is raised as a ServiceError subclass. The API maps
the error's kind to an HTTP status through STATUS_BY_KIND.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Tag identifying which collaborator failed and how."""

    USER_NOT_FOUND = "USER_NOT_FOUND"
    DIRECTORY_UNAVAILABLE = "DIRECTORY_UNAVAILABLE"
    CALENDAR_OPERATION_FAILED = "CALENDAR_OPERATION_FAILED"
    MAIL_DELIVERY_FAILED = "MAIL_DELIVERY_FAILED"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.USER_NOT_FOUND: 404,
    ErrorKind.DIRECTORY_UNAVAILABLE: 500,
    ErrorKind.CALENDAR_OPERATION_FAILED: 500,
    ErrorKind.MAIL_DELIVERY_FAILED: 500,
}


class ServiceError(Exception):
    """Base class for failures surfaced to API callers."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class UserNotFound(ServiceError):
    kind = ErrorKind.USER_NOT_FOUND

    def __init__(self, username: str):
        super().__init__(f"User {username} not found")
        self.username = username


class DirectoryUnavailable(ServiceError):
    kind = ErrorKind.DIRECTORY_UNAVAILABLE


class CalendarOperationFailed(ServiceError):
    kind = ErrorKind.CALENDAR_OPERATION_FAILED

    def __init__(self, operation: str, message: str):
        super().__init__(f"Calendar {operation} failed: {message}")
        self.operation = operation
        self.provider_message = message


class MailDeliveryFailed(ServiceError):
    kind = ErrorKind.MAIL_DELIVERY_FAILED

    def __init__(self, message: str):
        super().__init__(f"Mail delivery failed: {message}")
        self.provider_message = message


def summarize_error_message(raw: str, limit: int = 200) -> str:
    """Collapse whitespace in a provider message and cap its length."""
    return " ".join(raw.split())[:limit]
