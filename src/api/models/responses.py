"""Pydantic response models for API endpoints."""

from typing import Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    providers_ready: bool
    missing_settings: list[str] = []
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class EventListResponse(BaseModel):
    events: list[dict[str, Any]]


class EventCreatedResponse(BaseModel):
    id: str


class EventDeletedResponse(BaseModel):
    success: bool = True
    id: str


class MessageResponse(BaseModel):
    message: str


class ErrorCodes:
    """Error code constants not covered by core.errors.ErrorKind."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    HTTP_ERROR = "HTTP_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
