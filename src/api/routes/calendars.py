"""Calendar event endpoints, addressed by directory username."""

from fastapi import APIRouter, Depends, Request

from api.dependencies import Calendar, Directory, verify_api_key
from api.models.requests import EventCreateRequest, EventScheduleRequest
from api.models.responses import (
    EventCreatedResponse,
    EventDeletedResponse,
    EventListResponse,
)
from services.directory import DirectoryClient

router = APIRouter(
    prefix="/calendars",
    tags=["calendars"],
    dependencies=[Depends(verify_api_key)],
)


async def resolve_calendar_id(
    request: Request, directory: DirectoryClient, username: str
) -> str:
    """Map a username to the calendar it owns (the user's email address)."""
    request.state.username = username
    user = await directory.resolve_user(username)
    return user["email"]


@router.get("/{username}/events", response_model=EventListResponse)
async def list_events(
    username: str, request: Request, directory: Directory, calendar: Calendar
):
    """List the user's next upcoming events, soonest first."""
    calendar_id = await resolve_calendar_id(request, directory, username)
    events = await calendar.list_upcoming(calendar_id)
    return EventListResponse(events=events)


@router.post("/{username}/events", response_model=EventCreatedResponse)
async def create_event(
    username: str,
    body: EventCreateRequest,
    request: Request,
    directory: Directory,
    calendar: Calendar,
):
    calendar_id = await resolve_calendar_id(request, directory, username)
    event_id = await calendar.create_event(
        calendar_id,
        summary=body.summary,
        location=body.location,
        description=body.description,
        start=body.start,
        end=body.end,
    )
    return EventCreatedResponse(id=event_id)


@router.put("/{username}/events/{event_id}")
async def reschedule_event(
    username: str,
    event_id: str,
    body: EventScheduleRequest,
    request: Request,
    directory: Directory,
    calendar: Calendar,
) -> dict:
    """Move an event to a new start/end and return the updated event."""
    calendar_id = await resolve_calendar_id(request, directory, username)
    return await calendar.reschedule_event(calendar_id, event_id, body.start, body.end)


@router.delete("/{username}/events/{event_id}", response_model=EventDeletedResponse)
async def delete_event(
    username: str,
    event_id: str,
    request: Request,
    directory: Directory,
    calendar: Calendar,
):
    calendar_id = await resolve_calendar_id(request, directory, username)
    await calendar.delete_event(calendar_id, event_id)
    return EventDeletedResponse(id=event_id)
