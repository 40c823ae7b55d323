"""FastAPI application entry point."""

import asyncio
import logging
import time
import warnings
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.logging import RequestLog, get_client_ip, log_request
from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import calendars_router, health_router, mail_router
from core.config import (
    API_DEBUG,
    API_VERSION,
    BOOKING_API_KEY,
    CORS_ALLOW_ORIGINS,
    DB_PATH,
    GOOGLE_CLIENT_EMAIL,
    GOOGLE_PRIVATE_KEY,
    PROVIDER_TIMEOUT_SECONDS,
    REQUEST_LOG_ENABLED,
    SMTP_AUTH_PASS,
    SMTP_AUTH_USER,
    SMTP_FROM,
    SMTP_HOST,
    SMTP_PORT,
    SUPABASE_ANON_KEY,
    SUPABASE_URL,
    missing_provider_settings,
)
from core.errors import ServiceError
from core.google_auth import ServiceAccountTokenProvider
from services.calendar import CalendarClient
from services.directory import DirectoryClient
from services.email import Mailer

logger = logging.getLogger(__name__)

_DEFAULT_LOG_PATH = DB_PATH if REQUEST_LOG_ENABLED else None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build any provider clients that were not injected, close them on shutdown."""
    state = app.state
    http_client = None

    if state.directory is None or state.calendar is None or state.mailer is None:
        state.missing_settings = missing_provider_settings()
        if state.missing_settings:
            warnings.warn(f"Missing provider settings: {', '.join(state.missing_settings)}")

        http_client = httpx.AsyncClient(timeout=PROVIDER_TIMEOUT_SECONDS)
        if state.directory is None:
            state.directory = DirectoryClient(SUPABASE_URL, SUPABASE_ANON_KEY, http_client)
        if state.calendar is None:
            tokens = ServiceAccountTokenProvider(
                GOOGLE_CLIENT_EMAIL, GOOGLE_PRIVATE_KEY, http_client
            )
            state.calendar = CalendarClient(tokens, http_client)
        if state.mailer is None:
            state.mailer = Mailer(SMTP_HOST, SMTP_PORT, SMTP_AUTH_USER, SMTP_AUTH_PASS, SMTP_FROM)

    yield

    if http_client is not None:
        await http_client.aclose()


def _error_content(error: str, code: str, details: list[str] | None = None) -> dict:
    return ErrorResponse(error=error, code=code, details=details or []).model_dump()


def create_app(
    directory: DirectoryClient | None = None,
    calendar: CalendarClient | None = None,
    mailer: Mailer | None = None,
    *,
    api_key: str = BOOKING_API_KEY,
    request_log_path: Path | None = _DEFAULT_LOG_PATH,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """
    Create the API with explicitly provided provider clients.

    Clients left as None are built from configuration at startup.
    """
    app = FastAPI(
        title="Inspection Booking API",
        description="Calendar bookings and notification mail for inspection requests",
        version=API_VERSION,
        debug=API_DEBUG,
        lifespan=lifespan,
    )
    app.state.directory = directory
    app.state.calendar = calendar
    app.state.mailer = mailer
    app.state.api_key = api_key
    app.state.missing_settings = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins if cors_origins is not None else CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def record_request(request: Request, call_next):
        start_time = time.time()
        request_log = RequestLog(
            endpoint=request.url.path,
            method=request.method,
            client_ip=get_client_ip(request),
        )
        try:
            response = await call_next(request)
            request_log.status_code = response.status_code
            return response
        except Exception as e:
            request_log.status_code = 500
            request_log.error_code = ErrorCodes.INTERNAL_ERROR
            request_log.error_message = str(e)
            raise
        finally:
            request_log.username = getattr(request.state, "username", None)
            request_log.error_code = getattr(request.state, "error_code", request_log.error_code)
            request_log.error_message = getattr(
                request.state, "error_message", request_log.error_message
            )
            request_log.processing_time_ms = int((time.time() - start_time) * 1000)
            if request_log_path is not None:
                try:
                    await asyncio.to_thread(log_request, request_log, request_log_path)
                except Exception as e:
                    # Don't fail the request if logging fails
                    logger.warning("Could not write request log: %s", e)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        request.state.error_code = exc.kind.value
        request.state.error_message = exc.message
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_content(exc.message, exc.kind.value),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
            for error in exc.errors()
        ]
        logger.warning("Validation error for %s: %s", request.url.path, details)
        request.state.error_code = ErrorCodes.INVALID_REQUEST
        request.state.error_message = "; ".join(details)
        return JSONResponse(
            status_code=422,
            content=_error_content("Invalid request", ErrorCodes.INVALID_REQUEST, details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            content = _error_content(
                exc.detail["error"],
                exc.detail.get("code", ErrorCodes.HTTP_ERROR),
                exc.detail.get("details"),
            )
        else:
            content = _error_content(str(exc.detail), ErrorCodes.HTTP_ERROR)
        request.state.error_code = content["code"]
        request.state.error_message = content["error"]
        return JSONResponse(
            status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None)
        )

    # Global exception handler for unexpected errors
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with standard error format."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=_error_content("Internal server error", ErrorCodes.INTERNAL_ERROR),
        )

    app.include_router(health_router)
    app.include_router(calendars_router)
    app.include_router(mail_router)

    return app


app = create_app()


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
