"""Postmark API: transactional email, templates, bounces, messages, stats."""

from __future__ import annotations

from typing import Any

from adapters.auth import HeaderAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.errors import UsageError
from core.tool import ApiTool

API_KEY = "POSTMARK_API_KEY"

commands = CommandTable(
    usage={
        "email": (
            "email [send --from <from> --to <to> --subject <subj> "
            "| send-template --from <from> --to <to> --template <id> "
            "| send-batch --from <from> --to <to1,to2> --subject <subj>]"
        ),
        "templates": "templates [list | get --id <id> | create --name <name> | delete --id <id>]",
        "bounces": "bounces [list | get --id <id> | stats | activate --id <id>]",
        "messages": "messages [outbound | inbound | get --id <id>]",
        "stats": "stats [overview | sends | bounces | opens | clicks | spam]",
        "server": "server [get]",
        "suppressions": "suppressions [list | create --email <email> | delete --email <email>]",
    },
    notes={"options": "--tag <tag> --from <date> --to <date> --stream <stream-id>"},
)


def _copy(ctx: CommandContext, body: dict[str, Any], pairs: tuple[tuple[str, str], ...]) -> dict[str, Any]:
    for flag, field in pairs:
        if ctx.args.value(flag):
            body[field] = ctx.args.value(flag)
    return body


def _page(ctx: CommandContext, count: str) -> dict[str, str | None]:
    return {"count": ctx.args.value("count", count), "offset": ctx.args.value("offset", "0")}


def _stream(ctx: CommandContext) -> str:
    return ctx.args.value("stream", "outbound")


def _suppressions(ctx: CommandContext) -> dict[str, Any]:
    emails = ctx.args.require("email").split(",")
    return {"Suppressions": [{"EmailAddress": e.strip()} for e in emails]}


@commands.command("email", "send")
def email_send(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    body: dict[str, Any] = {"From": a.require("from"), "To": a.require("to"), "Subject": a.require("subject")}
    _copy(ctx, body, (("html", "HtmlBody"), ("text", "TextBody")))
    if not a.value("html") and not a.value("text"):
        body["TextBody"] = ""
    _copy(ctx, body, (("tag", "Tag"), ("stream", "MessageStream")))
    if a.is_set("track-opens"):
        body["TrackOpens"] = True
    _copy(ctx, body, (("track-links", "TrackLinks"), ("cc", "Cc"), ("bcc", "Bcc"), ("reply-to", "ReplyTo")))
    return ctx.request("POST", "/email", body=body)


@commands.command("email", "send-template")
def email_send_template(ctx: CommandContext) -> RequestDescriptor:
    """Send with a stored template; numeric `--template` is an id, anything else an alias."""

    a = ctx.args
    body: dict[str, Any] = {"From": a.require("from"), "To": a.require("to"), "TemplateModel": {}}
    template = a.require("template", "template ID or alias")
    if template.strip().isdigit():
        body["TemplateId"] = int(template)
    else:
        body["TemplateAlias"] = template
    for pair in a.csv("model") or []:
        key, _, value = pair.partition(":")
        if key and value:
            body["TemplateModel"][key] = value.split(":", 1)[0]
    _copy(ctx, body, (("stream", "MessageStream"), ("tag", "Tag")))
    return ctx.request("POST", "/email/withTemplate", body=body)


@commands.command("email", "send-batch")
def email_send_batch(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    sender, recipients, subject = a.value("from"), a.csv("to"), a.value("subject")
    if not sender or not recipients or not subject:
        raise UsageError("--from, --to (comma-separated), and --subject required")
    messages = []
    for recipient in recipients:
        message: dict[str, Any] = {
            "From": sender,
            "To": recipient.strip(),
            "Subject": subject,
            "TextBody": a.value("text", ""),
        }
        messages.append(_copy(ctx, message, (("html", "HtmlBody"), ("stream", "MessageStream"), ("tag", "Tag"))))
    return ctx.request("POST", "/email/batch", body=messages)


@commands.command("templates", "list")
def templates_list(ctx: CommandContext) -> RequestDescriptor:
    params = {
        "Count": ctx.args.value("count", "100"),
        "Offset": ctx.args.value("offset", "0"),
        "TemplateType": ctx.args.value("type"),
    }
    return ctx.request("GET", "/templates", params=params)


@commands.command("templates", "get")
def templates_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/templates/{ctx.args.require('id', 'template ID or alias')}")


@commands.command("templates", "create")
def templates_create(ctx: CommandContext) -> RequestDescriptor:
    body: dict[str, Any] = {"Name": ctx.args.require("name"), "Subject": ctx.args.value("subject", "")}
    _copy(ctx, body, (("html", "HtmlBody"), ("text", "TextBody"), ("alias", "Alias"), ("type", "TemplateType")))
    return ctx.request("POST", "/templates", body=body)


@commands.command("templates", "delete")
def templates_delete(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", f"/templates/{ctx.args.require('id', 'template ID or alias')}")


@commands.command("bounces", "list")
def bounces_list(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    params = {
        **_page(ctx, "50"),
        "type": a.value("type"),
        "inactive": a.value("inactive"),
        "emailFilter": a.value("email"),
    }
    return ctx.request("GET", "/bounces", params=params)


@commands.command("bounces", "get")
def bounces_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/bounces/{ctx.args.require('id')}")


@commands.command("bounces", "stats")
def bounces_stats(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/deliverystats")


@commands.command("bounces", "activate")
def bounces_activate(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("PUT", f"/bounces/{ctx.args.require('id')}/activate")


@commands.command("messages", "outbound")
def messages_outbound(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    params = {
        **_page(ctx, "50"),
        "recipient": a.value("recipient"),
        "tag": a.value("tag"),
        "status": a.value("status"),
    }
    return ctx.request("GET", "/messages/outbound", params=params)


@commands.command("messages", "inbound")
def messages_inbound(ctx: CommandContext) -> RequestDescriptor:
    params = {**_page(ctx, "50"), "recipient": ctx.args.value("recipient"), "status": ctx.args.value("status")}
    return ctx.request("GET", "/messages/inbound", params=params)


@commands.command("messages", "get")
def messages_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/messages/outbound/{ctx.args.require('id', 'message ID')}/details")


def _register_stats(name: str, path: str) -> None:
    @commands.command("stats", name)
    def stats(ctx: CommandContext) -> RequestDescriptor:
        a = ctx.args
        params = {"tag": a.value("tag"), "fromdate": a.value("from"), "todate": a.value("to")}
        return ctx.request("GET", path, params=params)


for _name, _path in (
    ("overview", "/stats/outbound"),
    ("sends", "/stats/outbound/sends"),
    ("bounces", "/stats/outbound/bounces"),
    ("opens", "/stats/outbound/opens"),
    ("clicks", "/stats/outbound/clicks"),
    ("spam", "/stats/outbound/spam"),
):
    _register_stats(_name, _path)


@commands.command("server", "get")
def server_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/server")


@commands.command("suppressions", "list")
def suppressions_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/message-streams/{_stream(ctx)}/suppressions/dump")


@commands.command("suppressions", "create")
def suppressions_create(ctx: CommandContext) -> RequestDescriptor:
    body = _suppressions(ctx)
    return ctx.request("POST", f"/message-streams/{_stream(ctx)}/suppressions", body=body)


@commands.command("suppressions", "delete")
def suppressions_delete(ctx: CommandContext) -> RequestDescriptor:
    body = _suppressions(ctx)
    return ctx.request("POST", f"/message-streams/{_stream(ctx)}/suppressions/delete", body=body)


TOOL = ApiTool(
    name="postmark",
    description="Postmark transactional email API",
    base_url="https://api.postmarkapp.com",
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": HeaderAuth("X-Postmark-Server-Token", API_KEY)},
    commands=commands,
)
