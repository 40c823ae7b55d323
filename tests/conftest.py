"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fastapi.testclient import TestClient

from api.main import create_app
from core.errors import CalendarOperationFailed, DirectoryUnavailable, MailDeliveryFailed, UserNotFound
from services.calendar import format_event_time


class FakeDirectory:
    """In-memory directory keyed by username."""

    def __init__(self, users: dict[str, str] | None = None):
        self.users = users or {}
        self.unavailable = False
        self.lookups: list[str] = []

    async def resolve_user(self, username: str):
        self.lookups.append(username)
        if self.unavailable:
            raise DirectoryUnavailable("Database error: connection refused")
        if username not in self.users:
            raise UserNotFound(username)
        email = self.users[username]
        return {"username": username, "email": email, "row": {"email": email}}


class FakeCalendar:
    """In-memory calendar provider mirroring CalendarClient's interface."""

    def __init__(self):
        self.calendars: dict[str, dict[str, dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self.failure: str | None = None
        self._next_id = 1

    def _check(self, operation: str, calendar_id: str):
        self.calls.append((operation, calendar_id))
        if self.failure:
            raise CalendarOperationFailed(operation, self.failure)

    async def list_upcoming(self, calendar_id: str):
        self._check("list", calendar_id)
        events = sorted(
            self.calendars.get(calendar_id, {}).values(),
            key=lambda event: event["start"]["dateTime"],
        )
        return events[:3]

    async def create_event(self, calendar_id, summary, location, description, start, end):
        self._check("insert", calendar_id)
        event_id = f"evt{self._next_id}"
        self._next_id += 1
        self.calendars.setdefault(calendar_id, {})[event_id] = {
            "id": event_id,
            "summary": summary,
            "location": location,
            "description": description,
            "start": dict(format_event_time(start)),
            "end": dict(format_event_time(end)),
        }
        return event_id

    async def reschedule_event(self, calendar_id, event_id, start, end):
        self._check("update", calendar_id)
        event = self._get(calendar_id, event_id, "get")
        event["start"] = dict(format_event_time(start))
        event["end"] = dict(format_event_time(end))
        event["sequence"] = event.get("sequence", 0) + 1
        return event

    async def delete_event(self, calendar_id, event_id):
        self._check("delete", calendar_id)
        self._get(calendar_id, event_id, "delete")
        del self.calendars[calendar_id][event_id]

    def _get(self, calendar_id, event_id, operation):
        try:
            return self.calendars[calendar_id][event_id]
        except KeyError:
            raise CalendarOperationFailed(operation, "Not Found") from None


class FakeMailer:
    def __init__(self):
        self.sent: list[dict] = []
        self.failure: str | None = None

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.failure:
            raise MailDeliveryFailed(self.failure)
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture
def directory():
    return FakeDirectory({"anna": "anna@example.com", "bert": "bert@example.com"})


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def app(directory, calendar, mailer):
    return create_app(directory, calendar, mailer, api_key="", request_log_path=None)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
