"""Two-level command dispatch: `<command> <subcommand>` -> handler.

Each tool owns one `CommandTable`. Handlers are registered with a decorator
and receive a `CommandContext`; they validate flags and return a
`RequestDescriptor`. Usage problems never raise out of `dispatch`, they come
back as `{"error": ...}` payloads printed like any other result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping
from urllib.parse import urlencode

from core.domain.models import CredentialSet, ParsedArguments, RequestDescriptor
from core.errors import UsageError
from core.log import get_logger

logger = get_logger(__name__)

QueryValue = str | int | float | None


def build_url(base_url: str, path: str, params: Mapping[str, QueryValue] | None = None) -> str:
    """Join base URL, path and a query string (empty values dropped)."""

    url = f"{base_url}{path}"
    pairs = [(k, str(v)) for k, v in (params or {}).items() if v is not None]
    if not pairs:
        return url
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{urlencode(pairs, safe='*')}"


@dataclass(frozen=True)
class CommandContext:
    """What a handler gets to work with."""

    args: ParsedArguments
    credentials: CredentialSet
    base_url: str
    default_headers: Mapping[str, str] = field(default_factory=dict)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, QueryValue] | None = None,
        body: Any = None,
        auth: str | None = "default",
        headers: Mapping[str, str] | None = None,
    ) -> RequestDescriptor:
        merged = dict(self.default_headers)
        if headers:
            merged.update(headers)
        return RequestDescriptor(
            method=method,
            url=build_url(self.base_url, path, params),
            headers=merged,
            body=body,
            auth=auth,
        )


Handler = Callable[[CommandContext], RequestDescriptor]


@dataclass(frozen=True)
class CommandSpec:
    command: str
    subcommand: str | None
    handler: Handler


class CommandTable:
    """Lookup table of the operations a tool supports.

    A handler registered without a subcommand serves the bare command and
    any subcommand that has no handler of its own.
    """

    def __init__(
        self,
        *,
        usage: Mapping[str, str] | None = None,
        notes: Mapping[str, str] | None = None,
    ) -> None:
        self._handlers: dict[str, dict[str | None, CommandSpec]] = {}
        self._usage = dict(usage or {})
        self._notes = dict(notes or {})

    def command(self, command: str, subcommand: str | None = None) -> Callable[[Handler], Handler]:
        def register(handler: Handler) -> Handler:
            subs = self._handlers.setdefault(command, {})
            if subcommand in subs:
                raise ValueError(f"duplicate handler for {command!r} {subcommand!r}")
            subs[subcommand] = CommandSpec(command, subcommand, handler)
            return handler

        return register

    def operations(self) -> list[tuple[str, str | None]]:
        return [(cmd, sub) for cmd, subs in self._handlers.items() for sub in subs]

    def usage(self) -> dict[str, str]:
        out = {cmd: self._usage.get(cmd, cmd) for cmd in self._handlers}
        out.update(self._notes)
        return out

    def lookup(self, command: str | None, subcommand: str | None) -> CommandSpec | dict[str, Any]:
        subs = self._handlers.get(command) if command is not None else None
        if subs is None:
            return {"error": "Unknown command", "usage": self.usage()}

        spec = subs.get(subcommand) if subcommand is not None else None
        if spec is None:
            spec = subs.get(None)
        if spec is None:
            names = ", ".join(s for s in subs if s is not None)
            return {
                "error": f"Unknown {command} subcommand. Use: {names}",
                "usage": self._usage.get(command, command),
            }
        return spec

    def dispatch(self, ctx: CommandContext) -> RequestDescriptor | dict[str, Any]:
        found = self.lookup(ctx.args.command, ctx.args.subcommand)
        if isinstance(found, dict):
            logger.debug("dispatch.unknown command=%s subcommand=%s", ctx.args.command, ctx.args.subcommand)
            return found

        logger.debug("dispatch command=%s subcommand=%s", found.command, found.subcommand)
        try:
            return found.handler(ctx)
        except UsageError as exc:
            return {"error": str(exc)}
