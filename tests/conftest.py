"""Shared fixtures: isolated settings and a recording mock transport.

No test touches the network; live-path tests route through
`httpx.MockTransport`.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterator

import httpx
import pytest

from core.config import AppSettings


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response | Callable[[httpx.Request], httpx.Response]) -> None:
        self._responses = list(responses) or [httpx.Response(200, json={"ok": True})]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self._responses)) - 1
        response = self._responses[index]
        return response(request) if callable(response) else response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture()
def make_recorder() -> Callable[..., Recorder]:
    return Recorder


@pytest.fixture(autouse=True)
def _no_settings_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("MKT_CLIS_LOG_LEVEL", "MKT_CLIS_HTTP_TIMEOUT_SECONDS", "MKT_CLIS_USER_AGENT", "MKT_CLIS_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    yield
