"""Program boundary shared by every tool.

gate -> parse -> dispatch -> execute -> print, with a single place where
failures turn into `{"error": ...}` on stderr and exit code 1.
"""

from __future__ import annotations

import asyncio
from typing import Mapping, Sequence

import httpx
import typer

from adapters.json_exporter import render_line, render_pretty
from core.args import parse_args
from core.config import AppSettings
from core.credentials import read_credentials
from core.log import configure_logging, get_logger
from core.services.invocation import invoke
from core.tool import ApiTool

logger = get_logger(__name__)


def run_program(
    tool: ApiTool,
    argv: Sequence[str],
    *,
    settings: AppSettings | None = None,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Run one invocation of `tool` and return the process exit code.

    - 0: a result was printed to stdout (including `{"error": ...}` results).
    - 1: missing credentials or an unexpected failure; one JSON line on stderr.
    """

    try:
        settings = settings or AppSettings()
        configure_logging(settings.log_level, json_mode=settings.log_json)
        credentials = read_credentials(tool.credentials, environ)
        args = parse_args(argv)
        result = asyncio.run(
            invoke(tool, args, credentials, settings=settings, transport=transport, environ=environ)
        )
    except Exception as exc:
        logger.debug("program.failed tool=%s", tool.name, exc_info=True)
        typer.echo(render_line({"error": str(exc) or type(exc).__name__}), err=True)
        return 1

    typer.echo(render_pretty(result))
    return 0
