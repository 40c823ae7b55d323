"""
User directory lookups against the Supabase REST (PostgREST) interface.
"""

import logging
from typing import Any

import httpx

from core.config import (
    DIRECTORY_EMAIL_COLUMN,
    DIRECTORY_ORDER_COLUMN,
    DIRECTORY_TABLE,
    DIRECTORY_USERNAME_COLUMN,
)
from core.errors import DirectoryUnavailable, UserNotFound, summarize_error_message
from models.events import UserRecord

logger = logging.getLogger(__name__)


class DirectoryClient:
    """Resolves usernames to directory rows."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        http_client: httpx.AsyncClient,
        *,
        table: str = DIRECTORY_TABLE,
        username_column: str = DIRECTORY_USERNAME_COLUMN,
        email_column: str = DIRECTORY_EMAIL_COLUMN,
        order_column: str = DIRECTORY_ORDER_COLUMN,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._http_client = http_client
        self._table = table
        self._username_column = username_column
        self._email_column = email_column
        self._order_column = order_column

    async def resolve_user(self, username: str) -> UserRecord:
        """
        Look up the single directory row for a username.

        Matching is exact and case-sensitive. When the store holds several rows
        for the same username, the first by the order column wins.

        Raises:
            UserNotFound: no row matches
            DirectoryUnavailable: the store cannot be queried or returns junk
        """
        if not username:
            raise UserNotFound(username)

        rows = await self._query(username)
        if not rows:
            raise UserNotFound(username)

        if len(rows) > 1:
            logger.warning(
                "Directory has %d rows for username %r, using the first by %s",
                len(rows),
                username,
                self._order_column or "store order",
            )

        row = rows[0]
        email = row.get(self._email_column)
        if not isinstance(email, str) or not email:
            raise DirectoryUnavailable(f"Directory record for {username} has no email")

        return UserRecord(username=username, email=email, row=row)

    async def _query(self, username: str) -> list[dict[str, Any]]:
        params = {
            "select": "*",
            self._username_column: f"eq.{username}",
        }
        if self._order_column:
            params["order"] = f"{self._order_column}.asc"

        try:
            response = await self._http_client.get(
                f"{self._base_url}/rest/v1/{self._table}",
                params=params,
                headers={
                    "apikey": self._api_key,
                    "Authorization": f"Bearer {self._api_key}",
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as e:
            logger.error("Directory request failed: %s", e)
            raise DirectoryUnavailable(f"Database error: {e}") from e

        if response.status_code != 200:
            message = summarize_error_message(response.text) or f"HTTP {response.status_code}"
            logger.error("Directory query rejected (%d): %s", response.status_code, message)
            if response.status_code == 400 and self._order_column:
                logger.error(
                    "Rows are ordered by column %r; if %s has no such column, "
                    "set DIRECTORY_ORDER_COLUMN to an existing column or to an empty value",
                    self._order_column,
                    self._table,
                )
            raise DirectoryUnavailable(f"Database error: {message}")

        try:
            rows = response.json()
        except ValueError as e:
            raise DirectoryUnavailable("Database error: invalid JSON response") from e

        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise DirectoryUnavailable("Database error: unexpected response shape")
        return rows
