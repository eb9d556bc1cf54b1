"""Hotjar API: sites, surveys, heatmaps, recordings, forms.

Authenticates with an OAuth client-credentials token fetched on first use.
"""

from __future__ import annotations

from adapters.auth import ClientCredentialsAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.tool import ApiTool

CLIENT_ID = "HOTJAR_CLIENT_ID"
CLIENT_SECRET = "HOTJAR_CLIENT_SECRET"
BASE_URL = "https://api.hotjar.io/v1"

commands = CommandTable(
    usage={
        "sites": "sites list",
        "surveys": (
            "surveys list --site-id <id> | surveys responses --site-id <id> --survey-id <id> "
            "[--limit <n>] [--cursor <cursor>]"
        ),
        "heatmaps": "heatmaps list --site-id <id>",
        "recordings": (
            "recordings list --site-id <id> [--limit <n>] [--cursor <cursor>] "
            "[--date-from <date>] [--date-to <date>]"
        ),
        "forms": "forms list --site-id <id>",
    },
)


def _site(ctx: CommandContext) -> str:
    return f"/sites/{ctx.args.require('site-id')}"


@commands.command("sites", "list")
def sites_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/sites")


@commands.command("surveys", "list")
def surveys_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"{_site(ctx)}/surveys")


@commands.command("surveys", "responses")
def surveys_responses(ctx: CommandContext) -> RequestDescriptor:
    site = _site(ctx)
    survey_id = ctx.args.require("survey-id")
    params = {"limit": ctx.args.value("limit", "100"), "cursor": ctx.args.value("cursor")}
    return ctx.request("GET", f"{site}/surveys/{survey_id}/responses", params=params)


@commands.command("heatmaps", "list")
def heatmaps_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"{_site(ctx)}/heatmaps")


@commands.command("recordings", "list")
def recordings_list(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    site = _site(ctx)
    params = {
        "limit": a.value("limit", "100"),
        "cursor": a.value("cursor"),
        "date_from": a.value("date-from"),
        "date_to": a.value("date-to"),
    }
    return ctx.request("GET", f"{site}/recordings", params=params)


@commands.command("forms", "list")
def forms_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"{_site(ctx)}/forms")


TOOL = ApiTool(
    name="hotjar",
    description="Hotjar behaviour analytics API",
    base_url=BASE_URL,
    credentials=(CredentialSpec(name=CLIENT_ID), CredentialSpec(name=CLIENT_SECRET)),
    auth={"default": ClientCredentialsAuth(f"{BASE_URL}/oauth/token", CLIENT_ID, CLIENT_SECRET)},
    commands=commands,
)
