"""API Pydantic models."""

from .requests import (
    CertificateAvailableMail,
    EventCreateRequest,
    EventScheduleRequest,
    NewRequestMail,
    VisitDateChangedMail,
)
from .responses import (
    ErrorCodes,
    ErrorResponse,
    EventCreatedResponse,
    EventDeletedResponse,
    EventListResponse,
    HealthResponse,
    MessageResponse,
)

__all__ = [
    "CertificateAvailableMail",
    "ErrorCodes",
    "ErrorResponse",
    "EventCreateRequest",
    "EventCreatedResponse",
    "EventDeletedResponse",
    "EventListResponse",
    "EventScheduleRequest",
    "HealthResponse",
    "MessageResponse",
    "NewRequestMail",
    "VisitDateChangedMail",
]
