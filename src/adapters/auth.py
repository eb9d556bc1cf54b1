"""Auth schemes used by the tool adapters.

Every scheme implements `core.interfaces.auth.AuthScheme`:
- `masked()` describes where the credential goes, with `***` in its place.
- `resolve()` reads the credential (or fetches a token) at send time.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal

import httpx

from core.domain.models import DRY_RUN_MASK, CredentialSet
from core.errors import TokenFetchError
from core.interfaces.auth import AuthParts
from core.log import get_logger

logger = get_logger(__name__)


def basic_credentials(user: str, password: str) -> str:
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class TokenCache:
    """Single in-memory slot for an OAuth access token.

    Owned by one executor, i.e. one process; nothing is persisted.
    """

    def __init__(self) -> None:
        self._token: str | None = None

    @property
    def token(self) -> str | None:
        return self._token

    async def get_or_fetch(self, fetch: Callable[[], Awaitable[str]]) -> str:
        if self._token is None:
            self._token = await fetch()
        return self._token


@dataclass(frozen=True)
class HeaderAuth:
    """Credential placed in a header, e.g. `Authorization: Bearer <key>`."""

    header: str
    credential: str
    template: str = "{}"

    def masked(self) -> AuthParts:
        return AuthParts(headers={self.header: DRY_RUN_MASK})

    async def resolve(self, credentials: CredentialSet, client: httpx.AsyncClient, cache: TokenCache) -> AuthParts:
        value = credentials.get(self.credential) or ""
        return AuthParts(headers={self.header: self.template.format(value)})


def bearer(credential: str) -> HeaderAuth:
    return HeaderAuth("Authorization", credential, "Bearer {}")


@dataclass(frozen=True)
class BasicAuth:
    """HTTP Basic from a user variable and an optional password variable."""

    user: str
    password: str | None = None

    def masked(self) -> AuthParts:
        return AuthParts(headers={"Authorization": DRY_RUN_MASK})

    async def resolve(self, credentials: CredentialSet, client: httpx.AsyncClient, cache: TokenCache) -> AuthParts:
        user = credentials.get(self.user) or ""
        password = (credentials.get(self.password) if self.password else None) or ""
        return AuthParts(headers={"Authorization": basic_credentials(user, password)})


@dataclass(frozen=True)
class QueryAuth:
    """Credential sent as a query parameter."""

    param: str
    credential: str

    def masked(self) -> AuthParts:
        return AuthParts(params={self.param: DRY_RUN_MASK})

    async def resolve(self, credentials: CredentialSet, client: httpx.AsyncClient, cache: TokenCache) -> AuthParts:
        return AuthParts(params={self.param: credentials.get(self.credential) or ""})


@dataclass(frozen=True)
class ClientCredentialsAuth:
    """OAuth client-credentials grant, then `Authorization: Bearer <token>`.

    `style="form"` posts client_id/client_secret in the form body;
    `style="basic"` sends them as HTTP Basic with only the grant type in the body.
    """

    token_url: str
    client_id: str
    client_secret: str
    style: Literal["form", "basic"] = "form"
    missing_message: str | None = None

    def masked(self) -> AuthParts:
        return AuthParts(headers={"Authorization": DRY_RUN_MASK})

    async def resolve(self, credentials: CredentialSet, client: httpx.AsyncClient, cache: TokenCache) -> AuthParts:
        token = await cache.get_or_fetch(lambda: self._fetch(credentials, client))
        return AuthParts(headers={"Authorization": f"Bearer {token}"})

    async def _fetch(self, credentials: CredentialSet, client: httpx.AsyncClient) -> str:
        client_id = credentials.get(self.client_id)
        client_secret = credentials.get(self.client_secret)
        if not client_id or not client_secret:
            raise TokenFetchError(self.missing_message or f"{self.client_id} and {self.client_secret} required")

        data = {"grant_type": "client_credentials"}
        headers: dict[str, str] = {}
        if self.style == "basic":
            headers["Authorization"] = basic_credentials(client_id, client_secret)
        else:
            data["client_id"] = client_id
            data["client_secret"] = client_secret

        logger.debug("token.fetch url=%s", self.token_url)
        response = await client.post(self.token_url, data=data, headers=headers)
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("access_token"):
            return str(payload["access_token"])

        detail = None
        if isinstance(payload, dict):
            detail = payload.get("error_description") or payload.get("error")
        raise TokenFetchError(str(detail or "Failed to obtain access token"))
