"""One tool invocation, from parsed arguments to the printable result.

The CLI layer only deals with argv, exit codes and printing; this module owns
the dispatch -> (dry-run | execute) flow so it can be driven from tests
without a terminal.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from adapters.http_client import RequestExecutor
from core.config import AppSettings
from core.domain.models import CredentialSet, ParsedArguments
from core.errors import UsageError
from core.log import get_logger
from core.tool import ApiTool

logger = get_logger(__name__)

DRY_RUN_FLAG = "dry-run"


async def invoke(
    tool: ApiTool,
    args: ParsedArguments,
    credentials: CredentialSet,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    environ: Mapping[str, str] | None = None,
) -> Any:
    """Dispatch `args` against `tool` and return the value to print.

    Usage errors (including a base URL that cannot be derived) and unknown
    commands come back as `{"error": ...}` payloads.
    Transport failures propagate.
    """

    try:
        ctx = tool.context(args, credentials, environ)
    except UsageError as exc:
        return {"error": str(exc)}
    planned = tool.commands.dispatch(ctx)
    if isinstance(planned, dict):
        return planned

    executor = RequestExecutor(tool, credentials, settings=settings, transport=transport)
    return await executor.run(planned, dry_run=args.is_set(DRY_RUN_FLAG))
