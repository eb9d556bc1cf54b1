"""PartnerStack API v2: partnerships, customers, transactions, deals, leads, rewards."""

from __future__ import annotations

from typing import Any

from adapters.auth import BasicAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.tool import ApiTool

PUBLIC_KEY = "PARTNERSTACK_PUBLIC_KEY"
SECRET_KEY = "PARTNERSTACK_SECRET_KEY"

commands = CommandTable(
    usage={
        "partnerships": (
            "partnerships [list | get --key <key> | create --email <email> --group <group-key> | update --key <key>]"
        ),
        "customers": (
            "customers [list | get --key <key> | create --email <email> --partner-key <key> "
            "| update --key <key> | delete --key <key>]"
        ),
        "transactions": (
            "transactions [list | get --key <key> | create --customer-key <key> --amount <cents> | delete --key <key>]"
        ),
        "deals": (
            "deals [list | get --key <key> | create --partner-key <key> --name <name> | update --key <key> "
            "| archive --key <key>]"
        ),
        "actions": "actions [list | create --customer-key <key> --action-key <key> [--value <n>]]",
        "rewards": "rewards [list | create --partner-key <key> --amount <cents>]",
        "leads": "leads [list | get --key <key> | create --partner-key <key> --email <email> | update --key <key>]",
        "groups": "groups [list]",
        "webhooks": "webhooks [list | get --key <key> | create --target <url> [--events <evt1,evt2>] | delete --key <key>]",
    },
    notes={"options": "--limit <n> --after <cursor> --before <cursor> --order-by <field>"},
)


def _cursor(ctx: CommandContext) -> dict[str, str | None]:
    a = ctx.args
    return {
        "limit": a.value("limit"),
        "starting_after": a.value("after"),
        "ending_before": a.value("before"),
        "order_by": a.value("order-by"),
    }


def _key(ctx: CommandContext, what: str) -> str:
    return ctx.args.require("key", f"{what} key")


def _copy(ctx: CommandContext, body: dict[str, Any], pairs: tuple[tuple[str, str], ...]) -> dict[str, Any]:
    for flag, field in pairs:
        if ctx.args.value(flag):
            body[field] = ctx.args.value(flag)
    return body


def _copy_number(ctx: CommandContext, body: dict[str, Any], flag: str, field: str) -> dict[str, Any]:
    number = ctx.args.number(flag)
    if number is not None:
        body[field] = number
    return body


def _register_list(resource: str) -> None:
    @commands.command(resource, "list")
    def list_(ctx: CommandContext) -> RequestDescriptor:
        return ctx.request("GET", f"/{resource}", params=_cursor(ctx))


def _register_by_key(resource: str, subcommand: str, method: str, what: str) -> None:
    @commands.command(resource, subcommand)
    def by_key(ctx: CommandContext) -> RequestDescriptor:
        return ctx.request(method, f"/{resource}/{_key(ctx, what)}")


for _resource, _what in (
    ("partnerships", "partnership"),
    ("customers", "customer"),
    ("transactions", "transaction"),
    ("deals", "deal"),
    ("actions", None),
    ("rewards", None),
    ("leads", "lead"),
    ("groups", None),
    ("webhooks", "webhook"),
):
    _register_list(_resource)
    if _what:
        _register_by_key(_resource, "get", "GET", _what)

_register_by_key("customers", "delete", "DELETE", "customer")
_register_by_key("transactions", "delete", "DELETE", "transaction")
_register_by_key("deals", "archive", "DELETE", "deal")
_register_by_key("webhooks", "delete", "DELETE", "webhook")


@commands.command("partnerships", "create")
def partnerships_create(ctx: CommandContext) -> RequestDescriptor:
    body = {"email": ctx.args.require("email"), "group_key": ctx.args.require("group", "group key")}
    _copy(ctx, body, (("name", "name"), ("first-name", "first_name"), ("last-name", "last_name")))
    return ctx.request("POST", "/partnerships", body=body)


@commands.command("partnerships", "update")
def partnerships_update(ctx: CommandContext) -> RequestDescriptor:
    key = _key(ctx, "partnership")
    body = _copy(ctx, {}, (("name", "name"), ("group", "group_key")))
    return ctx.request("PATCH", f"/partnerships/{key}", body=body)


@commands.command("customers", "create")
def customers_create(ctx: CommandContext) -> RequestDescriptor:
    body = {"email": ctx.args.require("email"), "partner_key": ctx.args.require("partner-key")}
    _copy(ctx, body, (("name", "name"), ("customer-key", "customer_key")))
    return ctx.request("POST", "/customers", body=body)


@commands.command("customers", "update")
def customers_update(ctx: CommandContext) -> RequestDescriptor:
    key = _key(ctx, "customer")
    body = _copy(ctx, {}, (("name", "name"), ("email", "email"), ("partner-key", "partner_key")))
    return ctx.request("PATCH", f"/customers/{key}", body=body)


@commands.command("transactions", "create")
def transactions_create(ctx: CommandContext) -> RequestDescriptor:
    customer_key = ctx.args.require("customer-key")
    ctx.args.require("amount", "in cents")
    body = {"customer_key": customer_key, "amount": ctx.args.number("amount")}
    _copy(ctx, body, (("currency", "currency"), ("category", "category"), ("product-key", "product_key")))
    return ctx.request("POST", "/transactions", body=body)


@commands.command("deals", "create")
def deals_create(ctx: CommandContext) -> RequestDescriptor:
    body: dict[str, Any] = {"partner_key": ctx.args.require("partner-key"), "name": ctx.args.require("name")}
    _copy_number(ctx, body, "amount", "amount")
    _copy(ctx, body, (("currency", "currency"), ("stage", "stage")))
    return ctx.request("POST", "/deals", body=body)


@commands.command("deals", "update")
def deals_update(ctx: CommandContext) -> RequestDescriptor:
    key = _key(ctx, "deal")
    body = _copy(ctx, {}, (("name", "name"),))
    _copy_number(ctx, body, "amount", "amount")
    _copy(ctx, body, (("stage", "stage"), ("status", "status")))
    return ctx.request("PATCH", f"/deals/{key}", body=body)


@commands.command("actions", "create")
def actions_create(ctx: CommandContext) -> RequestDescriptor:
    body: dict[str, Any] = {"customer_key": ctx.args.require("customer-key"), "key": ctx.args.require("action-key")}
    _copy_number(ctx, body, "value", "value")
    return ctx.request("POST", "/actions", body=body)


@commands.command("rewards", "create")
def rewards_create(ctx: CommandContext) -> RequestDescriptor:
    partner_key = ctx.args.require("partner-key")
    ctx.args.require("amount", "in cents")
    body = {"partner_key": partner_key, "amount": ctx.args.number("amount")}
    _copy(ctx, body, (("description", "description"), ("currency", "currency")))
    return ctx.request("POST", "/rewards", body=body)


@commands.command("leads", "create")
def leads_create(ctx: CommandContext) -> RequestDescriptor:
    body = {"partner_key": ctx.args.require("partner-key"), "email": ctx.args.require("email")}
    _copy(ctx, body, (("name", "name"), ("company", "company")))
    return ctx.request("POST", "/leads", body=body)


@commands.command("leads", "update")
def leads_update(ctx: CommandContext) -> RequestDescriptor:
    key = _key(ctx, "lead")
    body = _copy(ctx, {}, (("email", "email"), ("name", "name"), ("status", "status")))
    return ctx.request("PATCH", f"/leads/{key}", body=body)


@commands.command("webhooks", "create")
def webhooks_create(ctx: CommandContext) -> RequestDescriptor:
    body: dict[str, Any] = {"target": ctx.args.require("target", "webhook URL")}
    if ctx.args.value("events"):
        body["events"] = ctx.args.csv("events")
    return ctx.request("POST", "/webhooks", body=body)


TOOL = ApiTool(
    name="partnerstack",
    description="PartnerStack partner/affiliate API",
    base_url="https://api.partnerstack.com/api/v2",
    credentials=(CredentialSpec(name=PUBLIC_KEY), CredentialSpec(name=SECRET_KEY)),
    auth={"default": BasicAuth(PUBLIC_KEY, SECRET_KEY)},
    commands=commands,
)
