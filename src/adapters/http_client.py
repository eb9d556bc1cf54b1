"""httpx wrapper and request executor.

- `build_async_client` standardizes timeout and User-Agent for every tool.
- `RequestExecutor` turns a `RequestDescriptor` into either a masked dry-run
  preview or exactly one HTTP request.
- Tests swap the network for `httpx.MockTransport` through `transport=`.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from adapters.auth import TokenCache
from core.config import AppSettings
from core.dispatch import build_url
from core.domain.models import CredentialSet, RequestDescriptor
from core.errors import TokenFetchError
from core.interfaces.auth import AuthParts, AuthScheme
from core.log import get_logger
from core.tool import ApiTool

logger = get_logger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the shared defaults."""

    settings = settings or AppSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


def decode_json_or_text(status: int, text: str) -> Any:
    """Parsed JSON body, or `{"status", "body"}` when the body is not JSON."""

    try:
        return json.loads(text)
    except ValueError:
        return {"status": status, "body": text}


class RequestExecutor:
    """Executes descriptors for one tool invocation.

    Holds the token caches, so a client-credentials token is fetched at most
    once per executor (one executor per process).
    """

    def __init__(
        self,
        tool: ApiTool,
        credentials: CredentialSet,
        *,
        settings: AppSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._tool = tool
        self._credentials = credentials
        self._settings = settings or AppSettings()
        self._transport = transport
        self._caches: dict[str, TokenCache] = {}

    def _scheme(self, descriptor: RequestDescriptor) -> AuthScheme | None:
        if descriptor.auth is None:
            return None
        try:
            return self._tool.auth[descriptor.auth]
        except KeyError:
            raise LookupError(f"{self._tool.name}: no auth scheme named {descriptor.auth!r}") from None

    def preview(self, descriptor: RequestDescriptor) -> dict[str, Any]:
        """Dry-run view of a descriptor; credentials appear as `***`."""

        scheme = self._scheme(descriptor)
        parts = scheme.masked() if scheme is not None else AuthParts()
        out: dict[str, Any] = {
            "_dry_run": True,
            "method": descriptor.method,
            "url": build_url(descriptor.url, "", parts.params),
            "headers": {**descriptor.headers, **parts.headers},
        }
        if descriptor.body is not None:
            out["body"] = descriptor.body
        return out

    async def run(self, descriptor: RequestDescriptor, *, dry_run: bool = False) -> Any:
        if dry_run:
            logger.debug("request.dry_run method=%s url=%s", descriptor.method, descriptor.url)
            return self.preview(descriptor)

        scheme = self._scheme(descriptor)
        async with build_async_client(self._settings, transport=self._transport) as client:
            if scheme is None:
                parts = AuthParts()
            else:
                cache = self._caches.setdefault(descriptor.auth or "", TokenCache())
                try:
                    parts = await scheme.resolve(self._credentials, client, cache)
                except TokenFetchError as exc:
                    logger.debug("token.failed tool=%s", self._tool.name)
                    return {"error": str(exc)}

            content = None
            if descriptor.body is not None:
                content = json.dumps(descriptor.body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

            logger.debug("request.send method=%s url=%s", descriptor.method, descriptor.url)
            response = await client.request(
                descriptor.method,
                build_url(descriptor.url, "", parts.params),
                headers={**descriptor.headers, **parts.headers},
                content=content,
            )

        logger.debug("request.done status=%s", response.status_code)
        decode = self._tool.decode or decode_json_or_text
        return decode(response.status_code, response.text)
