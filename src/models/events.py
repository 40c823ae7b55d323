"""
Data models for directory users and calendar events.

Provider payloads are passed through as dictionaries so fields this service
does not know about survive a read-modify-write; TypedDict gives them shape.
"""

from typing import Any, TypedDict


class UserRecord(TypedDict):
    """Directory row resolved from a username."""
    username: str
    email: str
    row: dict[str, Any]


class EventDateTime(TypedDict, total=False):
    dateTime: str
    date: str
    timeZone: str


class CalendarEvent(TypedDict, total=False):
    """Calendar event as returned by the Google Calendar API."""
    id: str
    status: str
    htmlLink: str
    summary: str
    location: str
    description: str
    start: EventDateTime
    end: EventDateTime
    sequence: int
    updated: str
