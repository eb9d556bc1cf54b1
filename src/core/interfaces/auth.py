"""Auth scheme contract.

A scheme knows which headers / query parameters carry a credential. It
renders them masked for dry-run previews and resolves the real values only
at send time, so secrets never end up inside a `RequestDescriptor`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from core.domain.models import CredentialSet

if TYPE_CHECKING:
    import httpx

    from adapters.auth import TokenCache


@dataclass(frozen=True)
class AuthParts:
    headers: dict[str, str] = field(default_factory=dict, repr=False)
    params: dict[str, str] = field(default_factory=dict, repr=False)


@runtime_checkable
class AuthScheme(Protocol):
    """Contract for credential-bearing request decoration.

    Rules:
    - `masked` never reads a credential value.
    - `resolve` may perform one token fetch through `client`, caching the
      result in `cache` for the rest of the process.
    """

    def masked(self) -> AuthParts:
        ...

    async def resolve(
        self,
        credentials: CredentialSet,
        client: "httpx.AsyncClient",
        cache: "TokenCache",
    ) -> AuthParts:
        ...
