"""Trustpilot API.

Public endpoints use the `apikey` header. Private (business-user) endpoints
need `TRUSTPILOT_API_SECRET` and go through an OAuth token ("bearer" scheme).
"""

from __future__ import annotations

from typing import Any

from adapters.auth import ClientCredentialsAuth, HeaderAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.errors import UsageError
from core.tool import ApiTool

API_KEY = "TRUSTPILOT_API_KEY"
API_SECRET = "TRUSTPILOT_API_SECRET"
BUSINESS_UNIT_ID = "TRUSTPILOT_BUSINESS_UNIT_ID"
BASE_URL = "https://api.trustpilot.com/v1"
DEFAULT_REDIRECT = "https://trustpilot.com"

commands = CommandTable(
    usage={
        "business": "business [search --query <q> | get | profile | categories | web-links]",
        "reviews": (
            "reviews [list | get --id <id> | private | latest | reply --id <id> --message <msg> "
            "| delete-reply --id <id>]"
        ),
        "invitations": "invitations [create --email <e> --name <n> | link --email <e> --name <n> | templates]",
        "tags": "tags [get --id <id> | add --id <id> --group <g> --value <v> | remove --id <id> --group <g> --value <v>]",
    },
    notes={"options": "--business-unit <id> --limit <n> --stars <1-5> --language <code>"},
)


def _business_unit(ctx: CommandContext) -> str:
    unit = ctx.args.value("business-unit") or ctx.credentials.get(BUSINESS_UNIT_ID)
    if not unit:
        raise UsageError(f"--business-unit or {BUSINESS_UNIT_ID} required")
    return unit


def _limit(ctx: CommandContext) -> int:
    return ctx.args.integer("limit", 20)


def _tag(ctx: CommandContext) -> tuple[str, str, str]:
    review_id = ctx.args.require("id")
    group = ctx.args.value("group")
    value = ctx.args.value("value")
    if not group or not value:
        raise UsageError("--group and --value required")
    return review_id, group, value


def _invitee(ctx: CommandContext) -> tuple[str, str, str]:
    unit = _business_unit(ctx)
    return unit, ctx.args.require("email"), ctx.args.require("name")


@commands.command("business", "search")
def business_search(ctx: CommandContext) -> RequestDescriptor:
    query = ctx.args.require("query")
    return ctx.request("GET", "/business-units/search", params={"query": query, "limit": _limit(ctx)})


@commands.command("business", "get")
def business_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/business-units/{_business_unit(ctx)}")


@commands.command("business", "profile")
def business_profile(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/business-units/{_business_unit(ctx)}/profileinfo")


@commands.command("business", "categories")
def business_categories(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/business-units/{_business_unit(ctx)}/categories")


@commands.command("business", "web-links")
def business_web_links(ctx: CommandContext) -> RequestDescriptor:
    unit = _business_unit(ctx)
    return ctx.request("GET", f"/business-units/{unit}/web-links", params={"locale": ctx.args.value("locale", "en-US")})


@commands.command("reviews", "list")
def reviews_list(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    unit = _business_unit(ctx)
    params = {
        "perPage": _limit(ctx),
        "orderBy": a.value("order-by", "createdat.desc"),
        "stars": a.value("stars"),
        "language": a.value("language"),
    }
    return ctx.request("GET", f"/business-units/{unit}/reviews", params=params)


@commands.command("reviews", "get")
def reviews_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/reviews/{ctx.args.require('id')}")


@commands.command("reviews", "private")
def reviews_private(ctx: CommandContext) -> RequestDescriptor:
    unit = _business_unit(ctx)
    params = {"perPage": _limit(ctx), "stars": ctx.args.value("stars")}
    return ctx.request("GET", f"/private/business-units/{unit}/reviews", params=params, auth="bearer")


@commands.command("reviews", "latest")
def reviews_latest(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/reviews/latest", params={"count": _limit(ctx)})


@commands.command("reviews", "reply")
def reviews_reply(ctx: CommandContext) -> RequestDescriptor:
    review_id = ctx.args.require("id")
    message = ctx.args.require("message")
    return ctx.request("POST", f"/private/reviews/{review_id}/reply", body={"message": message}, auth="bearer")


@commands.command("reviews", "delete-reply")
def reviews_delete_reply(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", f"/private/reviews/{ctx.args.require('id')}/reply", auth="bearer")


@commands.command("invitations", "create")
def invitations_create(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    unit, email, name = _invitee(ctx)
    payload: dict[str, Any] = {
        "consumerEmail": email,
        "consumerName": name,
        "referenceNumber": a.value("reference", ""),
    }
    for flag, field in (("sender-email", "senderEmail"), ("reply-to", "replyTo"), ("template", "templateId")):
        if a.value(flag):
            payload[field] = a.value(flag)
    payload["redirectUri"] = a.value("redirect-uri", DEFAULT_REDIRECT)
    return ctx.request("POST", f"/private/business-units/{unit}/email-invitations", body=payload, auth="bearer")


@commands.command("invitations", "link")
def invitations_link(ctx: CommandContext) -> RequestDescriptor:
    unit, email, name = _invitee(ctx)
    body = {
        "email": email,
        "name": name,
        "referenceId": ctx.args.value("reference", ""),
        "redirectUri": ctx.args.value("redirect-uri", DEFAULT_REDIRECT),
    }
    return ctx.request("POST", f"/private/business-units/{unit}/invitation-links", body=body, auth="bearer")


@commands.command("invitations", "templates")
def invitations_templates(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/private/business-units/{_business_unit(ctx)}/templates", auth="bearer")


@commands.command("tags", "get")
def tags_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/private/reviews/{ctx.args.require('id')}/tags", auth="bearer")


@commands.command("tags", "add")
def tags_add(ctx: CommandContext) -> RequestDescriptor:
    review_id, group, value = _tag(ctx)
    body = {"tags": [{"group": group, "value": value}]}
    return ctx.request("PUT", f"/private/reviews/{review_id}/tags", body=body, auth="bearer")


@commands.command("tags", "remove")
def tags_remove(ctx: CommandContext) -> RequestDescriptor:
    review_id, group, value = _tag(ctx)
    params = {"group": group, "value": value}
    return ctx.request("DELETE", f"/private/reviews/{review_id}/tags", params=params, auth="bearer")


TOOL = ApiTool(
    name="trustpilot",
    description="Trustpilot reviews API",
    base_url=BASE_URL,
    credentials=(
        CredentialSpec(name=API_KEY),
        CredentialSpec(name=API_SECRET, required=False),
        CredentialSpec(name=BUSINESS_UNIT_ID, required=False),
    ),
    auth={
        "default": HeaderAuth("apikey", API_KEY),
        "bearer": ClientCredentialsAuth(
            f"{BASE_URL}/oauth/oauth-business-users-for-applications/accesstoken",
            API_KEY,
            API_SECRET,
            style="basic",
            missing_message=f"{API_SECRET} required for private API endpoints",
        ),
    },
    commands=commands,
)
