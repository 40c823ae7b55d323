"""
Calendar event operations against the Google Calendar v3 REST API.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Protocol
from urllib.parse import quote
from zoneinfo import ZoneInfo

import httpx

from core.config import CALENDAR_TIME_ZONE, GOOGLE_CALENDAR_API, UPCOMING_EVENTS_LIMIT
from core.errors import CalendarOperationFailed, summarize_error_message
from models.events import CalendarEvent, EventDateTime

logger = logging.getLogger(__name__)


class AccessTokenSource(Protocol):
    async def get_access_token(self) -> str: ...


def format_event_time(value: datetime, time_zone: str = CALENDAR_TIME_ZONE) -> EventDateTime:
    """
    Build a Google event time in the fixed calendar time zone.

    Naive datetimes are wall-clock times in that zone. Aware datetimes are
    converted into it first.
    """
    if value.tzinfo is not None:
        value = value.astimezone(ZoneInfo(time_zone))
    return EventDateTime(dateTime=value.isoformat(), timeZone=time_zone)


class CalendarClient:
    """Wraps list/insert/get/update/delete on a user's calendar."""

    def __init__(
        self,
        token_source: AccessTokenSource,
        http_client: httpx.AsyncClient,
        *,
        base_url: str = GOOGLE_CALENDAR_API,
        time_zone: str = CALENDAR_TIME_ZONE,
        upcoming_limit: int = UPCOMING_EVENTS_LIMIT,
    ):
        self._token_source = token_source
        self._http_client = http_client
        self._base_url = base_url.rstrip("/")
        self.time_zone = time_zone
        self.upcoming_limit = upcoming_limit

    async def list_upcoming(
        self, calendar_id: str, now: datetime | None = None
    ) -> list[CalendarEvent]:
        """
        Fetch the next few events, soonest first.

        Recurring events are expanded into their individual instances. The
        query is bounded below by ``now`` (``timeMin``), so events that already
        started are left out; without that bound Google returns the oldest
        events in the calendar.
        """
        now = now or datetime.now(timezone.utc)
        payload = await self._request(
            "list",
            "GET",
            self._events_path(calendar_id),
            params={
                "maxResults": self.upcoming_limit,
                "singleEvents": "true",
                "orderBy": "startTime",
                "timeMin": now.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
            },
        )
        items = payload.get("items", [])
        if not isinstance(items, list):
            raise CalendarOperationFailed("list", "unexpected response shape")
        return items[: self.upcoming_limit]

    async def create_event(
        self,
        calendar_id: str,
        summary: str,
        location: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        """Insert a new event and return its provider-assigned id."""
        body = {
            "summary": summary,
            "location": location,
            "description": description,
            "start": format_event_time(start, self.time_zone),
            "end": format_event_time(end, self.time_zone),
        }
        created = await self._request(
            "insert", "POST", self._events_path(calendar_id), json_body=body
        )
        event_id = created.get("id")
        if not isinstance(event_id, str) or not event_id:
            raise CalendarOperationFailed("insert", "response has no event id")
        return event_id

    async def get_event(self, calendar_id: str, event_id: str) -> CalendarEvent:
        return await self._request("get", "GET", self._event_path(calendar_id, event_id))

    async def reschedule_event(
        self, calendar_id: str, event_id: str, start: datetime, end: datetime
    ) -> CalendarEvent:
        """
        Move an event to a new start/end.

        The event is fetched and submitted back in full so every other field
        is preserved, with the sequence counter bumped by one. The fetch and
        the update are not atomic: a change made by someone else in between
        is overwritten unless the provider rejects the sequence.
        """
        current = await self.get_event(calendar_id, event_id)

        updated = copy.deepcopy(current)
        updated["start"] = format_event_time(start, self.time_zone)
        updated["end"] = format_event_time(end, self.time_zone)
        updated["sequence"] = int(current.get("sequence") or 0) + 1

        return await self._request(
            "update", "PUT", self._event_path(calendar_id, event_id), json_body=updated
        )

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        await self._request("delete", "DELETE", self._event_path(calendar_id, event_id))

    def _events_path(self, calendar_id: str) -> str:
        return f"/calendars/{quote(calendar_id, safe='')}/events"

    def _event_path(self, calendar_id: str, event_id: str) -> str:
        return f"{self._events_path(calendar_id)}/{quote(event_id, safe='')}"

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        access_token = await self._token_source.get_access_token()
        try:
            response = await self._http_client.request(
                method,
                f"{self._base_url}{path}",
                params=params,
                json=json_body,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.error("Calendar %s request failed: %s", operation, e)
            raise CalendarOperationFailed(operation, str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            message = google_error_message(response)
            logger.warning(
                "Calendar %s rejected (%d): %s", operation, response.status_code, message
            )
            raise CalendarOperationFailed(operation, message)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            payload = response.json()
        except ValueError as e:
            raise CalendarOperationFailed(operation, "invalid JSON response") from e
        if not isinstance(payload, dict):
            raise CalendarOperationFailed(operation, "unexpected response shape")
        return payload


def google_error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a Google API error response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return summarize_error_message(error["message"])
        if isinstance(error, str) and error.strip():
            return summarize_error_message(error)

    return summarize_error_message(response.text) or f"HTTP {response.status_code}"
