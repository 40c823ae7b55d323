"""Service-account token exchange."""

import base64
import json
from urllib.parse import parse_qs

import httpx
import pytest

from core.config import GOOGLE_TOKEN_URL
from core.errors import CalendarOperationFailed
from core.google_auth import JWT_BEARER_GRANT, ServiceAccountTokenProvider


class StubSigner:
    key_id = None

    def sign(self, message):
        return b"signature"


def decode_segment(segment: str) -> dict:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def make_provider(handler) -> ServiceAccountTokenProvider:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ServiceAccountTokenProvider(
        "agenda@project.iam.gserviceaccount.com",
        "",
        http_client,
        signer=StubSigner(),
    )


def test_assertion_claims():
    provider = make_provider(lambda request: httpx.Response(500))

    assertion = provider.build_assertion(now=1_700_000_000)

    header, payload, _ = assertion.split(".")
    assert decode_segment(header)["alg"] == "RS256"
    claims = decode_segment(payload)
    assert claims["iss"] == "agenda@project.iam.gserviceaccount.com"
    assert claims["aud"] == GOOGLE_TOKEN_URL
    assert "https://www.googleapis.com/auth/calendar" in claims["scope"].split()
    assert claims["exp"] - claims["iat"] == 3600


async def test_token_is_fetched_once_and_cached():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})

    provider = make_provider(handler)

    assert await provider.get_access_token() == "tok-1"
    assert await provider.get_access_token() == "tok-1"

    assert len(seen) == 1
    form = parse_qs(seen[0].content.decode())
    assert form["grant_type"] == [JWT_BEARER_GRANT]
    assert form["assertion"][0].count(".") == 2


async def test_rejected_grant_is_calendar_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "Invalid JWT Signature."}
        )

    with pytest.raises(CalendarOperationFailed) as exc_info:
        await make_provider(handler).get_access_token()

    assert exc_info.value.operation == "authorization"
    assert exc_info.value.provider_message == "Invalid JWT Signature."


async def test_invalid_private_key_is_calendar_failure():
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
    provider = ServiceAccountTokenProvider("agenda@example.com", "not a key", http_client)

    with pytest.raises(CalendarOperationFailed):
        await provider.get_access_token()
