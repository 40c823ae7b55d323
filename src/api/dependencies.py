"""FastAPI dependencies for authentication and shared provider clients."""

import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from api.models.responses import ErrorCodes
from services.calendar import CalendarClient
from services.directory import DirectoryClient
from services.email import Mailer


async def verify_api_key(
    request: Request,
    x_api_key: str | None = Header(None, alias="X-API-Key"),
) -> str | None:
    """
    Verify API key from X-API-Key header when the server has one configured.

    Raises:
        HTTPException: 401 if key is missing or invalid
    """
    expected = request.app.state.api_key
    if not expected:
        return None

    # Use constant-time comparison to prevent timing attacks
    if not x_api_key or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )

    return x_api_key


def _client(request: Request, name: str):
    client = getattr(request.app.state, name, None)
    if client is None:
        raise RuntimeError(f"{name} client is not initialized")
    return client


def get_directory(request: Request) -> DirectoryClient:
    return _client(request, "directory")


def get_calendar(request: Request) -> CalendarClient:
    return _client(request, "calendar")


def get_mailer(request: Request) -> Mailer:
    return _client(request, "mailer")


Directory = Annotated[DirectoryClient, Depends(get_directory)]
Calendar = Annotated[CalendarClient, Depends(get_calendar)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]
