"""Tool definition: everything that distinguishes one API wrapper from another."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSet, CredentialSpec, ParsedArguments
from core.interfaces.auth import AuthScheme

JSON_HEADERS: Mapping[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

BaseUrlFactory = Callable[[CredentialSet, Mapping[str, str]], str]
ResponseDecoder = Callable[[int, str], Any]


@dataclass(frozen=True)
class ApiTool:
    """One third-party API wrapper.

    `base_url` is either a fixed string or a factory evaluated after the
    credential gate (some APIs derive the host from the key or from an
    environment toggle). `decode` replaces the default JSON-or-text response
    handling when set.
    """

    name: str
    description: str
    base_url: str | BaseUrlFactory
    credentials: tuple[CredentialSpec, ...]
    auth: Mapping[str, AuthScheme]
    commands: CommandTable
    headers: Mapping[str, str] = field(default_factory=lambda: dict(JSON_HEADERS))
    decode: ResponseDecoder | None = None

    @property
    def env_vars(self) -> list[str]:
        return [spec.name for spec in self.credentials]

    def resolve_base_url(self, credentials: CredentialSet, environ: Mapping[str, str] | None = None) -> str:
        if isinstance(self.base_url, str):
            return self.base_url
        return self.base_url(credentials, os.environ if environ is None else environ)

    def context(
        self,
        args: ParsedArguments,
        credentials: CredentialSet,
        environ: Mapping[str, str] | None = None,
    ) -> CommandContext:
        return CommandContext(
            args=args,
            credentials=credentials,
            base_url=self.resolve_base_url(credentials, environ),
            default_headers=dict(self.headers),
        )
