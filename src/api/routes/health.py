"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core.config import API_VERSION

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if unhealthy.
    """
    state = request.app.state
    providers_ready = all(
        getattr(state, name, None) is not None for name in ("directory", "calendar", "mailer")
    )
    missing_settings = list(getattr(state, "missing_settings", []))
    timestamp = datetime.now(timezone.utc).isoformat()

    if providers_ready and not missing_settings:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            providers_ready=True,
            timestamp=timestamp,
        )

    error = (
        f"Missing settings: {', '.join(missing_settings)}"
        if missing_settings
        else "Provider clients not initialized"
    )
    return JSONResponse(
        status_code=503,
        content=HealthResponse(
            status="unhealthy",
            version=API_VERSION,
            providers_ready=providers_ready,
            missing_settings=missing_settings,
            timestamp=timestamp,
            error=error,
        ).model_dump(),
    )
