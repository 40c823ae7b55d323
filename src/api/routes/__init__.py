"""API route modules."""

from .calendars import router as calendars_router
from .health import router as health_router
from .mail import router as mail_router

__all__ = ["calendars_router", "health_router", "mail_router"]
