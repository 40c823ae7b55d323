#!/usr/bin/env python3
"""
Show the upcoming calendar events for a directory user.

Resolves the username the same way the API does, so it doubles as a check
that the directory and service-account credentials work.

Usage:
    uv run python src/scripts/list_upcoming_events.py <username>
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx

from core.config import (
    GOOGLE_CLIENT_EMAIL,
    GOOGLE_PRIVATE_KEY,
    PROVIDER_TIMEOUT_SECONDS,
    SUPABASE_ANON_KEY,
    SUPABASE_URL,
)
from core.errors import ServiceError
from core.google_auth import ServiceAccountTokenProvider
from services.calendar import CalendarClient
from services.directory import DirectoryClient


def describe_event(event: dict) -> str:
    start = event.get("start", {})
    when = start.get("dateTime") or start.get("date") or "?"
    return f"{when}  {event.get('summary', '(no title)')}  [{event.get('id')}]"


async def show_upcoming(username: str) -> None:
    async with httpx.AsyncClient(timeout=PROVIDER_TIMEOUT_SECONDS) as http_client:
        directory = DirectoryClient(SUPABASE_URL, SUPABASE_ANON_KEY, http_client)
        tokens = ServiceAccountTokenProvider(GOOGLE_CLIENT_EMAIL, GOOGLE_PRIVATE_KEY, http_client)
        calendar = CalendarClient(tokens, http_client)

        user = await directory.resolve_user(username)
        print(f"User: {username}")
        print(f"  Calendar: {user['email']}")

        events = await calendar.list_upcoming(user["email"])
        if not events:
            print("  No upcoming events")
        for event in events:
            print(f"    - {describe_event(event)}")


def main():
    parser = argparse.ArgumentParser(description="List upcoming events for a directory user")
    parser.add_argument("username", help="Username as stored in the directory")
    args = parser.parse_args()

    try:
        asyncio.run(show_upcoming(args.username))
    except ServiceError as e:
        print(f"\nError: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
