"""Umbrella CLI (Typer).

- `mkt <tool> <command> <subcommand> [--flag value]...` runs a tool; every
  token after the tool name is passed through untouched.
- `mkt tools` lists the available tools.
- `mkt doctor run` checks which credentials are configured.
"""

from __future__ import annotations

import typer
from rich.console import Console

from adapters.tools import TOOLS
from cli import doctor
from cli.program import run_program
from cli.ui_components import build_tools_table, print_banner
from core.tool import ApiTool

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Command-line wrappers for marketing, analytics and CRM APIs.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()

_PASSTHROUGH = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": [],
}


def _register(tool: ApiTool) -> None:
    @app.command(name=tool.name, help=tool.description, context_settings=_PASSTHROUGH)
    def _run(ctx: typer.Context) -> None:
        raise typer.Exit(code=run_program(tool, list(ctx.args)))


for _tool in TOOLS.values():
    _register(_tool)


@app.command("tools")
def list_tools(
    banner: bool = typer.Option(False, "--banner", help="Print the banner before the table."),
) -> None:
    """List tools, their base URLs and credential variables."""

    if banner:
        print_banner(_console)
    _console.print(build_tools_table(sorted(TOOLS.values(), key=lambda t: t.name)))


def run() -> None:
    app()
