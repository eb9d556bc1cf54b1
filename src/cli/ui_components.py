"""Rich UI components for the umbrella CLI.

Kept apart from the commands so `tools` and `doctor` share the same look.
Tool output itself is never rendered here: it stays plain JSON.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.tool import ApiTool


def print_banner(console: Console) -> None:
    title = Text("mkt-clis", style="bold cyan")
    subtitle = Text("Marketing API command-line tools", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_tools_table(tools: Iterable[ApiTool]) -> Table:
    """One row per tool: base URL, credential variables and operation count."""

    table = Table(title="Tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Base URL", style="magenta")
    table.add_column("Env vars", style="green")
    table.add_column("Ops", justify="right")

    for tool in tools:
        base_url = tool.base_url if isinstance(tool.base_url, str) else "(derived)"
        env_vars = ", ".join(
            spec.name if spec.required else f"{spec.name} (optional)" for spec in tool.credentials
        )
        table.add_row(tool.name, tool.description, base_url, env_vars, str(len(tool.commands.operations())))
    return table


def build_credentials_table(tools: Iterable[ApiTool], environ: Mapping[str, str]) -> Table:
    """Which credential variables are set. Values are never displayed."""

    table = Table(title="mkt-clis Doctor")
    table.add_column("Tool", style="bright_green", no_wrap=True)
    table.add_column("Variable", style="white")
    table.add_column("Status", style="white")

    for tool in tools:
        for spec in tool.credentials:
            if environ.get(spec.name):
                status = "[green]SET[/green]"
            elif spec.required:
                status = "[red]MISSING[/red]"
            else:
                status = "[dim]OPTIONAL[/dim]"
            table.add_row(tool.name, spec.name, status)
    return table
