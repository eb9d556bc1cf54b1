"""Brevo (ex-Sendinblue) API v3: contacts, lists, transactional email/SMS, campaigns."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from adapters.auth import HeaderAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.errors import UsageError
from core.tool import ApiTool

API_KEY = "BREVO_API_KEY"

commands = CommandTable(
    usage={
        "account": "account [get]",
        "contacts": (
            "contacts [list | get --email <email> | create --email <email> | update --email <email> "
            "| delete --email <email> | import --emails <e1,e2>]"
        ),
        "lists": (
            "lists [list | get --id <id> | create --name <name> | delete --id <id> | contacts --id <id> "
            "| add-contacts --id <id> --emails <e1,e2> | remove-contacts --id <id> --emails <e1,e2>]"
        ),
        "email": "email [send --from <from> --to <to> --subject <subj>]",
        "campaigns": (
            "campaigns [list | get --id <id> | create --name <name> | send-now --id <id> "
            "| send-test --id <id> --emails <e1,e2>]"
        ),
        "sms": "sms [send --from <name> --to <phone> --content <msg> | campaigns]",
        "senders": "senders [list | create --name <name> --email <email>]",
    },
    notes={"options": "--limit <n> --offset <n> --status <status>"},
)


def _page(ctx: CommandContext) -> dict[str, int | None]:
    return {"limit": ctx.args.integer("limit", 50), "offset": ctx.args.integer("offset", 0)}


def _contact(ctx: CommandContext) -> str:
    identifier = ctx.args.value("id") or ctx.args.value("email")
    if not identifier:
        raise UsageError("--id or --email required")
    return f"/contacts/{quote(identifier, safe='')}"


def _emails(ctx: CommandContext) -> list[str]:
    return ctx.args.csv("emails") or [ctx.args.require("emails", "comma-separated")]


def _name_attributes(ctx: CommandContext, body: dict[str, Any]) -> None:
    attributes = {}
    if ctx.args.value("first-name"):
        attributes["FIRSTNAME"] = ctx.args.value("first-name")
    if ctx.args.value("last-name"):
        attributes["LASTNAME"] = ctx.args.value("last-name")
    if attributes:
        body["attributes"] = attributes


@commands.command("account", "get")
def account_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/account")


@commands.command("contacts", "list")
def contacts_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/contacts", params={**_page(ctx), "sort": ctx.args.value("sort")})


@commands.command("contacts", "get")
def contacts_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", _contact(ctx))


@commands.command("contacts", "create")
def contacts_create(ctx: CommandContext) -> RequestDescriptor:
    body: dict[str, Any] = {"email": ctx.args.require("email")}
    _name_attributes(ctx, body)
    if ctx.args.value("list-ids"):
        body["listIds"] = ctx.args.csv_numbers("list-ids")
    return ctx.request("POST", "/contacts", body=body)


@commands.command("contacts", "update")
def contacts_update(ctx: CommandContext) -> RequestDescriptor:
    path = _contact(ctx)
    body: dict[str, Any] = {}
    _name_attributes(ctx, body)
    if ctx.args.value("list-ids"):
        body["listIds"] = ctx.args.csv_numbers("list-ids")
    if ctx.args.value("unlink-list-ids"):
        body["unlinkListIds"] = ctx.args.csv_numbers("unlink-list-ids")
    return ctx.request("PUT", path, body=body)


@commands.command("contacts", "delete")
def contacts_delete(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", _contact(ctx))


@commands.command("contacts", "import")
def contacts_import(ctx: CommandContext) -> RequestDescriptor:
    body: dict[str, Any] = {"jsonBody": [{"email": e.strip()} for e in _emails(ctx)]}
    if ctx.args.value("list-ids"):
        body["listIds"] = ctx.args.csv_numbers("list-ids")
    return ctx.request("POST", "/contacts/import", body=body)


@commands.command("lists", "list")
def lists_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/contacts/lists", params={**_page(ctx), "sort": ctx.args.value("sort")})


@commands.command("lists", "get")
def lists_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/contacts/lists/{ctx.args.require('id')}")


@commands.command("lists", "create")
def lists_create(ctx: CommandContext) -> RequestDescriptor:
    body = {"name": ctx.args.require("name"), "folderId": ctx.args.number("folder", 1)}
    return ctx.request("POST", "/contacts/lists", body=body)


@commands.command("lists", "update")
def lists_update(ctx: CommandContext) -> RequestDescriptor:
    list_id = ctx.args.require("id")
    body: dict[str, Any] = {}
    if ctx.args.value("name"):
        body["name"] = ctx.args.value("name")
    if ctx.args.value("folder"):
        body["folderId"] = ctx.args.number("folder")
    return ctx.request("PUT", f"/contacts/lists/{list_id}", body=body)


@commands.command("lists", "delete")
def lists_delete(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", f"/contacts/lists/{ctx.args.require('id')}")


@commands.command("lists", "contacts")
def lists_contacts(ctx: CommandContext) -> RequestDescriptor:
    list_id = ctx.args.require("id")
    return ctx.request("GET", f"/contacts/lists/{list_id}/contacts", params=_page(ctx))


@commands.command("lists", "add-contacts")
def lists_add_contacts(ctx: CommandContext) -> RequestDescriptor:
    list_id = ctx.args.require("id")
    return ctx.request("POST", f"/contacts/lists/{list_id}/contacts/add", body={"emails": _emails(ctx)})


@commands.command("lists", "remove-contacts")
def lists_remove_contacts(ctx: CommandContext) -> RequestDescriptor:
    list_id = ctx.args.require("id")
    return ctx.request("POST", f"/contacts/lists/{list_id}/contacts/remove", body={"emails": _emails(ctx)})


@commands.command("email", "send")
def email_send(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    sender: dict[str, str] = {"email": a.require("from")}
    to = a.csv("to") or [a.require("to")]
    subject = a.require("subject")
    if a.value("sender-name"):
        sender["name"] = a.value("sender-name")
    body: dict[str, Any] = {
        "sender": sender,
        "to": [{"email": e.strip()} for e in to],
        "subject": subject,
    }
    if a.value("html"):
        body["htmlContent"] = a.value("html")
    if a.value("text"):
        body["textContent"] = a.value("text")
    if not a.value("html") and not a.value("text"):
        body["textContent"] = ""
    if a.value("reply-to"):
        body["replyTo"] = {"email": a.value("reply-to")}
    if a.value("tags"):
        body["tags"] = a.csv("tags")
    return ctx.request("POST", "/smtp/email", body=body)


@commands.command("campaigns", "list")
def campaigns_list(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    params = {**_page(ctx), "type": a.value("type"), "status": a.value("status"), "sort": a.value("sort")}
    return ctx.request("GET", "/emailCampaigns", params=params)


@commands.command("campaigns", "get")
def campaigns_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/emailCampaigns/{ctx.args.require('id')}")


@commands.command("campaigns", "create")
def campaigns_create(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    sender: dict[str, str] = {"email": a.value("from", "")}
    if a.value("sender-name"):
        sender["name"] = a.value("sender-name")
    body: dict[str, Any] = {"name": a.require("name"), "sender": sender, "subject": a.value("subject", "")}
    if a.value("html"):
        body["htmlContent"] = a.value("html")
    if a.value("list-ids"):
        body["recipients"] = {"listIds": a.csv_numbers("list-ids")}
    return ctx.request("POST", "/emailCampaigns", body=body)


@commands.command("campaigns", "update")
def campaigns_update(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    campaign_id = a.require("id")
    body = {}
    for flag, field in (("name", "name"), ("subject", "subject"), ("html", "htmlContent")):
        if a.value(flag):
            body[field] = a.value(flag)
    return ctx.request("PUT", f"/emailCampaigns/{campaign_id}", body=body)


@commands.command("campaigns", "delete")
def campaigns_delete(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", f"/emailCampaigns/{ctx.args.require('id')}")


@commands.command("campaigns", "send-now")
def campaigns_send_now(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("POST", f"/emailCampaigns/{ctx.args.require('id')}/sendNow")


@commands.command("campaigns", "send-test")
def campaigns_send_test(ctx: CommandContext) -> RequestDescriptor:
    campaign_id = ctx.args.require("id")
    return ctx.request("POST", f"/emailCampaigns/{campaign_id}/sendTest", body={"emailTo": _emails(ctx)})


@commands.command("sms", "send")
def sms_send(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    body = {
        "sender": a.require("from", "sender name"),
        "recipient": a.require("to", "phone number"),
        "content": a.require("content"),
        "type": a.value("type", "transactional"),
    }
    return ctx.request("POST", "/transactionalSMS/sms", body=body)


@commands.command("sms", "campaigns")
def sms_campaigns(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/smsCampaigns", params={**_page(ctx), "status": ctx.args.value("status")})


@commands.command("senders", "list")
def senders_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/senders")


@commands.command("senders", "create")
def senders_create(ctx: CommandContext) -> RequestDescriptor:
    body = {"name": ctx.args.require("name"), "email": ctx.args.require("email")}
    return ctx.request("POST", "/senders", body=body)


TOOL = ApiTool(
    name="brevo",
    description="Brevo marketing and transactional messaging API",
    base_url="https://api.brevo.com/v3",
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": HeaderAuth("api-key", API_KEY)},
    commands=commands,
)
