from __future__ import annotations

import asyncio
import base64

import httpx
from pydantic import SecretStr

from adapters.auth import BasicAuth, QueryAuth, bearer
from adapters.http_client import RequestExecutor, build_async_client, decode_json_or_text
from core.config import AppSettings
from core.dispatch import CommandTable
from core.domain.models import CredentialSet, CredentialSpec, RequestDescriptor
from core.tool import ApiTool

SECRET = "sk-test-123"


def _tool(auth) -> ApiTool:
    return ApiTool(
        name="demo",
        description="demo",
        base_url="https://api.example.com",
        credentials=(CredentialSpec(name="DEMO_KEY"),),
        auth={"default": auth},
        commands=CommandTable(),
    )


def _creds() -> CredentialSet:
    return CredentialSet(values={"DEMO_KEY": SecretStr(SECRET)})


def _descriptor(**kwargs) -> RequestDescriptor:
    fields = {"method": "GET", "url": "https://api.example.com/things", "headers": {"Accept": "application/json"}}
    fields.update(kwargs)
    return RequestDescriptor(**fields)


def test_decode_json_or_text():
    assert decode_json_or_text(200, '{"a": 1}') == {"a": 1}
    assert decode_json_or_text(200, "[1, 2]") == [1, 2]
    assert decode_json_or_text(502, "<html>bad gateway</html>") == {"status": 502, "body": "<html>bad gateway</html>"}
    assert decode_json_or_text(204, "") == {"status": 204, "body": ""}


def test_build_async_client_uses_settings():
    client = build_async_client(AppSettings(_env_file=None, user_agent="ua/1", http_timeout_seconds=5))
    try:
        assert client.headers["User-Agent"] == "ua/1"
        assert client.timeout.read == 5
    finally:
        asyncio.run(client.aclose())


def test_preview_masks_header_credentials():
    executor = RequestExecutor(_tool(bearer("DEMO_KEY")), _creds())
    preview = executor.preview(_descriptor(method="POST", body={"x": 1}))
    assert preview == {
        "_dry_run": True,
        "method": "POST",
        "url": "https://api.example.com/things",
        "headers": {"Accept": "application/json", "Authorization": "***"},
        "body": {"x": 1},
    }
    assert SECRET not in repr(preview)


def test_preview_omits_absent_body_and_masks_query_credentials():
    executor = RequestExecutor(_tool(QueryAuth("key", "DEMO_KEY")), _creds())
    preview = executor.preview(_descriptor(url="https://api.example.com/?type=x"))
    assert "body" not in preview
    assert preview["url"] == "https://api.example.com/?type=x&key=***"


def test_dry_run_sends_nothing(recorder):
    executor = RequestExecutor(_tool(bearer("DEMO_KEY")), _creds(), transport=recorder.transport)
    first = asyncio.run(executor.run(_descriptor(), dry_run=True))
    second = asyncio.run(executor.run(_descriptor(), dry_run=True))
    assert first == second
    assert recorder.requests == []


def test_live_request_applies_auth_and_body(recorder, settings):
    executor = RequestExecutor(_tool(bearer("DEMO_KEY")), _creds(), settings=settings, transport=recorder.transport)
    result = asyncio.run(executor.run(_descriptor(method="POST", body={"name": "Zoë"})))

    assert result == {"ok": True}
    assert len(recorder.requests) == 1
    sent = recorder.requests[0]
    assert sent.method == "POST"
    assert str(sent.url) == "https://api.example.com/things"
    assert sent.headers["Authorization"] == f"Bearer {SECRET}"
    assert sent.headers["Accept"] == "application/json"
    assert recorder.body() == {"name": "Zoë"}


def test_live_request_without_body_sends_no_content(recorder, settings):
    executor = RequestExecutor(_tool(bearer("DEMO_KEY")), _creds(), settings=settings, transport=recorder.transport)
    asyncio.run(executor.run(_descriptor()))
    assert recorder.requests[0].content == b""


def test_live_query_auth_sends_real_key(recorder, settings):
    executor = RequestExecutor(_tool(QueryAuth("key", "DEMO_KEY")), _creds(), settings=settings, transport=recorder.transport)
    asyncio.run(executor.run(_descriptor(url="https://api.example.com/?type=x")))
    assert recorder.requests[0].url.params["key"] == SECRET
    assert recorder.requests[0].url.params["type"] == "x"


def test_basic_auth_with_empty_password(recorder, settings):
    executor = RequestExecutor(_tool(BasicAuth("DEMO_KEY")), _creds(), settings=settings, transport=recorder.transport)
    asyncio.run(executor.run(_descriptor()))
    expected = base64.b64encode(f"{SECRET}:".encode()).decode()
    assert recorder.requests[0].headers["Authorization"] == f"Basic {expected}"


def test_non_json_response_is_wrapped(make_recorder, settings):
    recorder = make_recorder(httpx.Response(503, text="Service Unavailable"))
    executor = RequestExecutor(_tool(bearer("DEMO_KEY")), _creds(), settings=settings, transport=recorder.transport)
    assert asyncio.run(executor.run(_descriptor())) == {"status": 503, "body": "Service Unavailable"}


def test_error_status_with_json_body_is_returned_as_is(make_recorder, settings):
    recorder = make_recorder(httpx.Response(404, json={"message": "not found"}))
    executor = RequestExecutor(_tool(bearer("DEMO_KEY")), _creds(), settings=settings, transport=recorder.transport)
    assert asyncio.run(executor.run(_descriptor())) == {"message": "not found"}


def test_unauthenticated_descriptor(recorder, settings):
    executor = RequestExecutor(_tool(bearer("DEMO_KEY")), _creds(), settings=settings, transport=recorder.transport)
    asyncio.run(executor.run(_descriptor(auth=None)))
    assert "Authorization" not in recorder.requests[0].headers
