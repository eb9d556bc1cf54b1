"""Mailchimp Marketing API 3.0.

The data-center host comes from the API key suffix (`...-us21`).
"""

from __future__ import annotations

from typing import Mapping

from adapters.auth import bearer
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSet, CredentialSpec, RequestDescriptor
from core.errors import UsageError
from core.tool import ApiTool

API_KEY = "MAILCHIMP_API_KEY"

commands = CommandTable(
    usage={
        "lists": "lists [list|get] [id] [--count <n>] [--offset <n>]",
        "members": (
            "members [list|add|update] [subscriber_hash] --list-id <id> [--email <email>] "
            "[--status <status>] [--first-name <name>] [--last-name <name>] [--tags <t1,t2>]"
        ),
        "campaigns": (
            "campaigns [list|get|create|send] [id] [--list-id <id>] [--subject <subject>] "
            "[--from-name <name>] [--reply-to <email>]"
        ),
        "reports": "reports get <campaign_id>",
        "automations": "automations list [--count <n>] [--offset <n>]",
    },
)


def base_url(credentials: CredentialSet, environ: Mapping[str, str]) -> str:
    key = credentials.get(API_KEY) or ""
    _, sep, dc = key.rpartition("-")
    if not sep or not dc.isalnum():
        raise UsageError(f"{API_KEY} must end with -<dc> (e.g. -us21)")
    return f"https://{dc}.api.mailchimp.com/3.0"


def _page(ctx: CommandContext) -> dict[str, int | None]:
    return {"count": ctx.args.integer("count"), "offset": ctx.args.integer("offset")}


def _list_id(ctx: CommandContext) -> str:
    list_id = ctx.args.value("list-id")
    if not list_id:
        raise UsageError(f"--list-id is required for members {ctx.args.subcommand}")
    return list_id


def _member_fields(ctx: CommandContext, body: dict[str, object]) -> dict[str, object]:
    a = ctx.args
    merge_fields = {}
    if a.value("first-name"):
        merge_fields["FNAME"] = a.value("first-name")
    if a.value("last-name"):
        merge_fields["LNAME"] = a.value("last-name")
    if merge_fields:
        body["merge_fields"] = merge_fields
    tags = a.csv("tags")
    if tags:
        body["tags"] = tags
    return body


@commands.command("lists", "list")
def lists_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/lists", params=_page(ctx))


@commands.command("lists", "get")
def lists_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/lists/{ctx.args.argument('list_id')}")


@commands.command("members", "list")
def members_list(ctx: CommandContext) -> RequestDescriptor:
    list_id = _list_id(ctx)
    params = {**_page(ctx), "status": ctx.args.value("status")}
    return ctx.request("GET", f"/lists/{list_id}/members", params=params)


@commands.command("members", "add")
def members_add(ctx: CommandContext) -> RequestDescriptor:
    list_id = _list_id(ctx)
    body: dict[str, object] = {
        "email_address": ctx.args.require("email"),
        "status": ctx.args.value("status", "subscribed"),
    }
    return ctx.request("POST", f"/lists/{list_id}/members", body=_member_fields(ctx, body))


@commands.command("members", "update")
def members_update(ctx: CommandContext) -> RequestDescriptor:
    list_id = _list_id(ctx)
    subscriber_hash = ctx.args.argument("subscriber_hash")
    body: dict[str, object] = {}
    if ctx.args.value("status"):
        body["status"] = ctx.args.value("status")
    return ctx.request("PATCH", f"/lists/{list_id}/members/{subscriber_hash}", body=_member_fields(ctx, body))


@commands.command("campaigns", "list")
def campaigns_list(ctx: CommandContext) -> RequestDescriptor:
    params = {**_page(ctx), "status": ctx.args.value("status"), "type": ctx.args.value("type")}
    return ctx.request("GET", "/campaigns", params=params)


@commands.command("campaigns", "get")
def campaigns_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/campaigns/{ctx.args.argument('campaign_id')}")


@commands.command("campaigns", "create")
def campaigns_create(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    settings = {}
    for flag, field in (
        ("subject", "subject_line"),
        ("from-name", "from_name"),
        ("reply-to", "reply_to"),
        ("title", "title"),
    ):
        if a.value(flag):
            settings[field] = a.value(flag)
    body = {
        "type": a.value("type", "regular"),
        "recipients": {"list_id": a.require("list-id")},
        "settings": settings,
    }
    return ctx.request("POST", "/campaigns", body=body)


@commands.command("campaigns", "send")
def campaigns_send(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("POST", f"/campaigns/{ctx.args.argument('campaign_id')}/actions/send")


@commands.command("reports", "get")
def reports_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/reports/{ctx.args.argument('campaign_id')}")


@commands.command("automations", "list")
def automations_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/automations", params=_page(ctx))


TOOL = ApiTool(
    name="mailchimp",
    description="Mailchimp Marketing API",
    base_url=base_url,
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": bearer(API_KEY)},
    commands=commands,
    headers={"Content-Type": "application/json"},
)
