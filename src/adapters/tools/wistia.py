"""Wistia Data API v1: projects, medias, stats, captions."""

from __future__ import annotations

from pathlib import Path

from adapters.auth import BasicAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.tool import ApiTool

API_KEY = "WISTIA_API_KEY"

PROJECT_ID = "project hashed ID"
MEDIA_ID = "media hashed ID"

commands = CommandTable(
    usage={
        "projects": (
            "projects [list | get --id <id> | create --name <name> | update --id <id> --name <name> "
            "| delete --id <id>]"
        ),
        "medias": (
            "medias [list [--project <id>] | get --id <id> | update --id <id> --name <name> | delete --id <id> "
            "| copy --id <id> [--target-project <id>] | stats --id <id>]"
        ),
        "stats": (
            "stats [account | project --id <id> | media --id <id> | media-by-date --id <id> "
            "[--start <date> --end <date>] | engagement --id <id> | visitors | visitor --key <key> "
            "| events [--media-id <id>]]"
        ),
        "account": "account",
        "captions": "captions [list --id <media-id> | create --id <media-id> --language <lang>]",
    },
    notes={"options": "--page <n> --per-page <n>"},
)


def _page(ctx: CommandContext) -> dict[str, int | None]:
    return {"page": ctx.args.integer("page", 1), "per_page": ctx.args.integer("per-page", 25)}


def _project(ctx: CommandContext) -> str:
    return ctx.args.require("id", PROJECT_ID)


def _media(ctx: CommandContext) -> str:
    return ctx.args.require("id", MEDIA_ID)


@commands.command("projects", "list")
def projects_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/projects.json", params=_page(ctx))


@commands.command("projects", "get")
def projects_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/projects/{_project(ctx)}.json")


@commands.command("projects", "create")
def projects_create(ctx: CommandContext) -> RequestDescriptor:
    body: dict[str, object] = {"name": ctx.args.require("name")}
    if ctx.args.is_set("public"):
        body["public"] = True
    return ctx.request("POST", "/projects.json", body=body)


@commands.command("projects", "update")
def projects_update(ctx: CommandContext) -> RequestDescriptor:
    project_id = _project(ctx)
    body = {"name": ctx.args.value("name")} if ctx.args.value("name") else {}
    return ctx.request("PUT", f"/projects/{project_id}.json", body=body)


@commands.command("projects", "delete")
def projects_delete(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", f"/projects/{_project(ctx)}.json")


@commands.command("medias", "list")
def medias_list(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    params = {**_page(ctx), "project_id": a.value("project"), "name": a.value("name"), "type": a.value("type")}
    return ctx.request("GET", "/medias.json", params=params)


@commands.command("medias", "get")
def medias_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/medias/{_media(ctx)}.json")


@commands.command("medias", "update")
def medias_update(ctx: CommandContext) -> RequestDescriptor:
    media_id = _media(ctx)
    body = {}
    for flag in ("name", "description"):
        if ctx.args.value(flag):
            body[flag] = ctx.args.value(flag)
    return ctx.request("PUT", f"/medias/{media_id}.json", body=body)


@commands.command("medias", "delete")
def medias_delete(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", f"/medias/{_media(ctx)}.json")


@commands.command("medias", "copy")
def medias_copy(ctx: CommandContext) -> RequestDescriptor:
    media_id = _media(ctx)
    target = ctx.args.value("target-project")
    body = {"project_id": target} if target else {}
    return ctx.request("POST", f"/medias/{media_id}/copy.json", body=body)


@commands.command("medias", "stats")
def medias_stats(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/medias/{_media(ctx)}/stats.json")


@commands.command("stats", "account")
def stats_account(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/stats/account.json")


@commands.command("stats", "project")
def stats_project(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/stats/projects/{_project(ctx)}.json")


@commands.command("stats", "media")
def stats_media(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/stats/medias/{_media(ctx)}.json")


@commands.command("stats", "media-by-date")
def stats_media_by_date(ctx: CommandContext) -> RequestDescriptor:
    media_id = _media(ctx)
    params = {"start_date": ctx.args.value("start"), "end_date": ctx.args.value("end")}
    return ctx.request("GET", f"/stats/medias/{media_id}/by_date.json", params=params)


@commands.command("stats", "engagement")
def stats_engagement(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/stats/medias/{_media(ctx)}/engagement.json")


@commands.command("stats", "visitors")
def stats_visitors(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/stats/visitors.json", params={**_page(ctx), "search": ctx.args.value("search")})


@commands.command("stats", "visitor")
def stats_visitor(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/stats/visitors/{ctx.args.require('key', 'visitor key')}.json")


@commands.command("stats", "events")
def stats_events(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/stats/events.json", params={**_page(ctx), "media_id": ctx.args.value("media-id")})


@commands.command("account")
def account(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/account.json")


@commands.command("captions", "list")
def captions_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/medias/{_media(ctx)}/captions.json")


@commands.command("captions", "create")
def captions_create(ctx: CommandContext) -> RequestDescriptor:
    """Add captions; `--srt-file` is read from disk and sent inline."""

    media_id = _media(ctx)
    body = {"language": ctx.args.require("language", "e.g. eng")}
    srt_file = ctx.args.value("srt-file")
    if srt_file:
        body["caption_file"] = Path(srt_file).read_text(encoding="utf-8")
    return ctx.request("POST", f"/medias/{media_id}/captions.json", body=body)


TOOL = ApiTool(
    name="wistia",
    description="Wistia video hosting API",
    base_url="https://api.wistia.com/v1",
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": BasicAuth(API_KEY)},
    commands=commands,
)
