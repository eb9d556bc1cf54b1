from __future__ import annotations

import asyncio
import base64
from urllib.parse import parse_qs

import httpx
from pydantic import SecretStr

from adapters.auth import ClientCredentialsAuth, TokenCache
from adapters.http_client import RequestExecutor
from adapters.tools import hotjar, trustpilot
from core.domain.models import CredentialSet, RequestDescriptor

HOTJAR_CREDS = CredentialSet(
    values={"HOTJAR_CLIENT_ID": SecretStr("cid"), "HOTJAR_CLIENT_SECRET": SecretStr("csecret")}
)


def _token_then_data(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/oauth/token"):
        return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})
    return httpx.Response(200, json={"sites": []})


def _sites() -> RequestDescriptor:
    return RequestDescriptor(method="GET", url="https://api.hotjar.io/v1/sites")


def test_token_fetched_once_per_executor(make_recorder, settings):
    recorder = make_recorder(_token_then_data)
    executor = RequestExecutor(hotjar.TOOL, HOTJAR_CREDS, settings=settings, transport=recorder.transport)

    async def twice():
        return [await executor.run(_sites()), await executor.run(_sites())]

    assert asyncio.run(twice()) == [{"sites": []}, {"sites": []}]
    paths = [r.url.path for r in recorder.requests]
    assert paths == ["/v1/oauth/token", "/v1/sites", "/v1/sites"]
    assert recorder.requests[1].headers["Authorization"] == "Bearer tok-1"


def test_form_style_token_request(make_recorder, settings):
    recorder = make_recorder(_token_then_data)
    executor = RequestExecutor(hotjar.TOOL, HOTJAR_CREDS, settings=settings, transport=recorder.transport)
    asyncio.run(executor.run(_sites()))

    token_request = recorder.requests[0]
    assert token_request.method == "POST"
    assert token_request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(token_request.content.decode()) == {
        "grant_type": ["client_credentials"],
        "client_id": ["cid"],
        "client_secret": ["csecret"],
    }


def test_missing_access_token_is_an_error_result(make_recorder, settings):
    recorder = make_recorder(httpx.Response(401, json={"error": "invalid_client"}))
    executor = RequestExecutor(hotjar.TOOL, HOTJAR_CREDS, settings=settings, transport=recorder.transport)
    assert asyncio.run(executor.run(_sites())) == {"error": "invalid_client"}
    assert len(recorder.requests) == 1


def test_error_description_wins(make_recorder, settings):
    recorder = make_recorder(httpx.Response(400, json={"error": "x", "error_description": "Bad secret"}))
    executor = RequestExecutor(hotjar.TOOL, HOTJAR_CREDS, settings=settings, transport=recorder.transport)
    assert asyncio.run(executor.run(_sites())) == {"error": "Bad secret"}


def test_non_json_token_response(make_recorder, settings):
    recorder = make_recorder(httpx.Response(500, text="oops"))
    executor = RequestExecutor(hotjar.TOOL, HOTJAR_CREDS, settings=settings, transport=recorder.transport)
    assert asyncio.run(executor.run(_sites())) == {"error": "Failed to obtain access token"}


def test_dry_run_skips_token_fetch(recorder):
    executor = RequestExecutor(hotjar.TOOL, HOTJAR_CREDS, transport=recorder.transport)
    preview = asyncio.run(executor.run(_sites(), dry_run=True))
    assert preview["headers"]["Authorization"] == "***"
    assert recorder.requests == []


def test_basic_style_token_request(make_recorder, settings):
    def handler(request: httpx.Request) -> httpx.Response:
        if "accesstoken" in request.url.path:
            return httpx.Response(200, json={"access_token": "tp-token"})
        return httpx.Response(200, json={"reviews": []})

    recorder = make_recorder(handler)
    creds = CredentialSet(
        values={"TRUSTPILOT_API_KEY": SecretStr("key"), "TRUSTPILOT_API_SECRET": SecretStr("secret")}
    )
    descriptor = RequestDescriptor(
        method="GET", url="https://api.trustpilot.com/v1/private/business-units/bu/reviews", auth="bearer"
    )
    executor = RequestExecutor(trustpilot.TOOL, creds, settings=settings, transport=recorder.transport)
    assert asyncio.run(executor.run(descriptor)) == {"reviews": []}

    token_request = recorder.requests[0]
    expected = base64.b64encode(b"key:secret").decode()
    assert token_request.headers["Authorization"] == f"Basic {expected}"
    assert token_request.content == b"grant_type=client_credentials"
    assert recorder.requests[1].headers["Authorization"] == "Bearer tp-token"


def test_missing_secret_reports_custom_message(recorder, settings):
    creds = CredentialSet(values={"TRUSTPILOT_API_KEY": SecretStr("key")})
    descriptor = RequestDescriptor(method="GET", url="https://api.trustpilot.com/v1/private/x", auth="bearer")
    executor = RequestExecutor(trustpilot.TOOL, creds, settings=settings, transport=recorder.transport)
    assert asyncio.run(executor.run(descriptor)) == {
        "error": "TRUSTPILOT_API_SECRET required for private API endpoints"
    }
    assert recorder.requests == []


def test_token_cache_single_slot():
    cache = TokenCache()
    calls = []

    async def fetch() -> str:
        calls.append(1)
        return f"t{len(calls)}"

    async def scenario():
        return [await cache.get_or_fetch(fetch), await cache.get_or_fetch(fetch)]

    assert asyncio.run(scenario()) == ["t1", "t1"]
    assert cache.token == "t1"
    assert calls == [1]


def test_masked_parts_never_read_credentials():
    scheme = ClientCredentialsAuth("https://x/token", "ID", "SECRET")
    assert scheme.masked().headers == {"Authorization": "***"}
