"""Doctor command for environment diagnostics."""

from __future__ import annotations

import os

import typer
from rich.console import Console

from adapters.tools import TOOLS, get_tool
from cli.ui_components import build_credentials_table
from core.config import AppSettings

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


@app.command()
def run(
    tool: str | None = typer.Option(None, "--tool", "-t", help="Only check this tool."),
) -> None:
    """Show which credential variables are set (values are never printed)."""

    settings = AppSettings()
    try:
        selected = [get_tool(tool)] if tool else list(TOOLS.values())
    except KeyError as exc:
        raise typer.BadParameter(exc.args[0], param_hint="--tool") from exc

    _console.print(build_credentials_table(selected, os.environ))

    timeout = "none" if settings.http_timeout_seconds is None else f"{settings.http_timeout_seconds}s"
    _console.print(f"[dim]HTTP timeout: {timeout} | User-Agent: {settings.user_agent} | log level: {settings.log_level}[/dim]")

    missing = [spec.name for t in selected for spec in t.credentials if spec.required and not os.environ.get(spec.name)]
    if missing:
        _console.print(f"\n[yellow]Note:[/yellow] {len(missing)} required variable(s) unset; those tools exit 1.")
