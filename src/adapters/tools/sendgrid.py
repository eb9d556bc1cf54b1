"""SendGrid v3: mail send, marketing contacts/campaigns, stats, suppressions, validation."""

from __future__ import annotations

from typing import Any

from adapters.auth import bearer
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.errors import UsageError
from core.tool import ApiTool

API_KEY = "SENDGRID_API_KEY"

commands = CommandTable(
    usage={
        "send": (
            "send --from <email> --to <email> --subject <subject> --html <html> [--text <text>] "
            "[--template-id <id>] [--template-data <json>]"
        ),
        "contacts": (
            "contacts [list|add|search] [--email <email>] [--first-name <name>] [--last-name <name>] "
            "[--list-ids <ids>] [--query <sgql>]"
        ),
        "campaigns": "campaigns [list|get] [id] [--limit <n>]",
        "stats": "stats get [--start-date <YYYY-MM-DD>] [--end-date <YYYY-MM-DD>]",
        "bounces": "bounces list [--start-time <ts>] [--end-time <ts>] [--limit <n>]",
        "spam-reports": "spam-reports list [--start-time <ts>] [--end-time <ts>] [--limit <n>]",
        "validate": "validate <email> OR validate email --email <email>",
    },
)


def _addresses(values: list[str]) -> list[dict[str, str]]:
    return [{"email": e.strip()} for e in values]


@commands.command("send")
def send(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    sender = a.require("from")
    recipients = a.csv("to") or [a.require("to")]
    personalization: dict[str, Any] = {"to": _addresses(recipients)}
    body: dict[str, Any] = {
        "personalizations": [personalization],
        "from": {"email": sender},
        "subject": a.require("subject"),
    }
    if a.value("template-id"):
        body["template_id"] = a.value("template-id")
        if a.value("template-data"):
            personalization["dynamic_template_data"] = a.json_value("template-data")
    else:
        content = []
        if a.value("text"):
            content.append({"type": "text/plain", "value": a.value("text")})
        if a.value("html"):
            content.append({"type": "text/html", "value": a.value("html")})
        if content:
            body["content"] = content
    if a.value("cc"):
        personalization["cc"] = _addresses(a.csv("cc"))
    if a.value("bcc"):
        personalization["bcc"] = _addresses(a.csv("bcc"))
    if a.value("reply-to"):
        body["reply_to"] = {"email": a.value("reply-to")}
    return ctx.request("POST", "/mail/send", body=body)


@commands.command("contacts", "list")
def contacts_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/marketing/contacts")


@commands.command("contacts", "add")
def contacts_add(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    contact = {"email": a.require("email")}
    if a.value("first-name"):
        contact["first_name"] = a.value("first-name")
    if a.value("last-name"):
        contact["last_name"] = a.value("last-name")
    body: dict[str, Any] = {"contacts": [contact]}
    if a.value("list-ids"):
        body["list_ids"] = a.csv("list-ids")
    return ctx.request("PUT", "/marketing/contacts", body=body)


@commands.command("contacts", "search")
def contacts_search(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("POST", "/marketing/contacts/search", body={"query": ctx.args.require("query", "SGQL")})


@commands.command("campaigns", "list")
def campaigns_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/marketing/campaigns", params={"page_size": ctx.args.value("limit")})


@commands.command("campaigns", "get")
def campaigns_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/marketing/campaigns/{ctx.args.argument('campaign_id')}")


@commands.command("stats", "get")
def stats_get(ctx: CommandContext) -> RequestDescriptor:
    params = {"start_date": ctx.args.value("start-date"), "end_date": ctx.args.value("end-date")}
    return ctx.request("GET", "/stats", params=params)


def _suppression_query(ctx: CommandContext) -> dict[str, str | None]:
    a = ctx.args
    return {"start_time": a.value("start-time"), "end_time": a.value("end-time"), "limit": a.value("limit")}


@commands.command("bounces", "list")
def bounces_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/suppression/bounces", params=_suppression_query(ctx))


@commands.command("spam-reports", "list")
def spam_reports_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/suppression/spam_reports", params=_suppression_query(ctx))


@commands.command("validate", "email")
def validate_email(ctx: CommandContext) -> RequestDescriptor:
    email = ctx.args.value("email") or ctx.args.argument("email")
    return ctx.request("POST", "/validations/email", body={"email": email})


@commands.command("validate")
def validate(ctx: CommandContext) -> RequestDescriptor:
    """`validate <email>`: the address sits where a subcommand would."""

    email = ctx.args.subcommand or ctx.args.value("email")
    if not email:
        raise UsageError("<email> argument required")
    return ctx.request("POST", "/validations/email", body={"email": email})


TOOL = ApiTool(
    name="sendgrid",
    description="SendGrid email API",
    base_url="https://api.sendgrid.com/v3",
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": bearer(API_KEY)},
    commands=commands,
    headers={"Content-Type": "application/json"},
)
