"""
Google service-account authentication for the Calendar API.

Signs a JWT bearer assertion with the service-account key and exchanges it
for an access token, caching the token until shortly before it expires.
"""

import asyncio
import time
from typing import Any

import httpx
from google.auth import crypt, jwt

from core.config import GOOGLE_CALENDAR_SCOPES, GOOGLE_TOKEN_URL
from core.errors import CalendarOperationFailed, summarize_error_message

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS = 3600
# Refresh a minute early so requests never race the expiry
EXPIRY_MARGIN_SECONDS = 60


class ServiceAccountTokenProvider:
    """Access-token source for a Google service account."""

    def __init__(
        self,
        client_email: str,
        private_key: str,
        http_client: httpx.AsyncClient,
        *,
        scopes: list[str] | None = None,
        token_url: str = GOOGLE_TOKEN_URL,
        signer: crypt.Signer | None = None,
    ):
        self._client_email = client_email
        self._private_key = private_key
        self._http_client = http_client
        self._scopes = scopes or GOOGLE_CALENDAR_SCOPES
        self._token_url = token_url
        self._signer = signer
        self._access_token: str | None = None
        self._expires_at = 0.0
        self._refresh_lock = asyncio.Lock()

    async def get_access_token(self) -> str:
        if self._token_is_fresh():
            return self._access_token

        async with self._refresh_lock:
            # Another request may have refreshed while we waited
            if not self._token_is_fresh():
                await self._refresh()
            return self._access_token

    def _token_is_fresh(self) -> bool:
        return self._access_token is not None and time.time() < self._expires_at

    def _get_signer(self) -> crypt.Signer:
        if self._signer is None:
            try:
                self._signer = crypt.RSASigner.from_string(self._private_key)
            except ValueError as e:
                raise CalendarOperationFailed(
                    "authorization", f"invalid service account key: {e}"
                ) from e
        return self._signer

    def build_assertion(self, now: float | None = None) -> str:
        """Create the signed JWT exchanged for an access token."""
        issued_at = int(now if now is not None else time.time())
        payload = {
            "iss": self._client_email,
            "scope": " ".join(self._scopes),
            "aud": self._token_url,
            "iat": issued_at,
            "exp": issued_at + ASSERTION_LIFETIME_SECONDS,
        }
        return jwt.encode(self._get_signer(), payload).decode("utf-8")

    async def _refresh(self) -> None:
        assertion = self.build_assertion()
        try:
            response = await self._http_client.post(
                self._token_url,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise CalendarOperationFailed("authorization", str(e)) from e

        payload = _json_or_none(response)
        if response.status_code != 200 or not isinstance(payload, dict):
            detail = response.text
            if isinstance(payload, dict):
                detail = payload.get("error_description") or payload.get("error") or detail
            raise CalendarOperationFailed(
                "authorization", summarize_error_message(str(detail)) or "token request rejected"
            )

        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise CalendarOperationFailed("authorization", "token response has no access_token")

        expires_in = payload.get("expires_in")
        if not isinstance(expires_in, (int, float)) or expires_in <= 0:
            expires_in = ASSERTION_LIFETIME_SECONDS

        self._access_token = access_token
        self._expires_at = time.time() + max(expires_in - EXPIRY_MARGIN_SECONDS, 0)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
