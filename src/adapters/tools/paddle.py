"""Paddle Billing API. `PADDLE_SANDBOX=true` targets the sandbox host."""

from __future__ import annotations

from typing import Any, Mapping

from adapters.auth import bearer
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSet, CredentialSpec, RequestDescriptor
from core.tool import ApiTool

API_KEY = "PADDLE_API_KEY"
SANDBOX_FLAG = "PADDLE_SANDBOX"

commands = CommandTable(
    usage={
        "products": "products [list | get --id <id> | create --name <n> --tax-category <cat> | update --id <id>]",
        "prices": (
            "prices [list | get --id <id> | create --product-id <id> --amount <amt> [--currency USD] "
            "[--interval month --frequency 1] | update --id <id>]"
        ),
        "customers": "customers [list | get --id <id> | create --email <email> [--name <name>] | update --id <id>]",
        "subscriptions": (
            "subscriptions [list | get --id <id> | update --id <id> | cancel --id <id> "
            "[--effective-from next_billing_period] | pause --id <id> | resume --id <id>]"
        ),
        "transactions": "transactions [list | get --id <id> | create --items <json>]",
        "discounts": "discounts [list | get --id <id> | create --amount <amt> --type <type> [--code <code>]]",
        "adjustments": "adjustments [list | create --transaction-id <id> --action <action> --reason <reason> --items <json>]",
        "events": "events [list | types]",
        "notifications": "notifications [list | get --id <id> | replay --id <id>]",
    },
    notes={"env": f"Set {SANDBOX_FLAG}=true for sandbox environment"},
)


def base_url(credentials: CredentialSet, environ: Mapping[str, str]) -> str:
    if environ.get(SANDBOX_FLAG) == "true":
        return "https://sandbox-api.paddle.com"
    return "https://api.paddle.com"


def _list_query(ctx: CommandContext) -> dict[str, str | None]:
    a = ctx.args
    return {
        "status": a.value("status"),
        "after": a.value("after"),
        "per_page": a.value("per-page"),
        "order_by": a.value("order-by"),
    }


def _optional(ctx: CommandContext, body: dict[str, Any], pairs: tuple[tuple[str, str], ...]) -> dict[str, Any]:
    for flag, field in pairs:
        value = ctx.args.value(flag)
        if value:
            body[field] = value
    return body


def _register_list(resource: str) -> None:
    @commands.command(resource, "list")
    def list_(ctx: CommandContext) -> RequestDescriptor:
        return ctx.request("GET", f"/{resource}", params=_list_query(ctx))


def _register_get(resource: str) -> None:
    @commands.command(resource, "get")
    def get(ctx: CommandContext) -> RequestDescriptor:
        return ctx.request("GET", f"/{resource}/{ctx.args.require('id')}")


for _resource in (
    "products",
    "prices",
    "customers",
    "subscriptions",
    "transactions",
    "discounts",
    "adjustments",
    "events",
    "notifications",
):
    _register_list(_resource)
    if _resource not in ("adjustments", "events"):
        _register_get(_resource)


@commands.command("products", "create")
def products_create(ctx: CommandContext) -> RequestDescriptor:
    name = ctx.args.require("name")
    tax_category = ctx.args.require("tax-category", "e.g. standard, digital-goods, saas")
    body = _optional(
        ctx,
        {"name": name, "tax_category": tax_category},
        (("description", "description"), ("image-url", "image_url")),
    )
    return ctx.request("POST", "/products", body=body)


@commands.command("products", "update")
def products_update(ctx: CommandContext) -> RequestDescriptor:
    product_id = ctx.args.require("id")
    body = _optional(
        ctx,
        {},
        (("name", "name"), ("description", "description"), ("status", "status"), ("tax-category", "tax_category")),
    )
    return ctx.request("PATCH", f"/products/{product_id}", body=body)


@commands.command("prices", "create")
def prices_create(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    product_id = a.require("product-id")
    amount = a.require("amount", "in lowest denomination, e.g. cents")
    body: dict[str, Any] = {
        "product_id": product_id,
        "description": a.value("description", "Price"),
        "unit_price": {"amount": amount, "currency_code": a.value("currency", "USD")},
    }
    if a.value("interval") and a.value("frequency"):
        body["billing_cycle"] = {"interval": a.value("interval"), "frequency": a.number("frequency")}
    return ctx.request("POST", "/prices", body=body)


@commands.command("prices", "update")
def prices_update(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    price_id = a.require("id")
    body: dict[str, Any] = {}
    if a.value("description"):
        body["description"] = a.value("description")
    if a.value("amount") and a.value("currency"):
        body["unit_price"] = {"amount": a.value("amount"), "currency_code": a.value("currency")}
    if a.value("status"):
        body["status"] = a.value("status")
    return ctx.request("PATCH", f"/prices/{price_id}", body=body)


@commands.command("customers", "create")
def customers_create(ctx: CommandContext) -> RequestDescriptor:
    body = _optional(ctx, {"email": ctx.args.require("email")}, (("name", "name"),))
    return ctx.request("POST", "/customers", body=body)


@commands.command("customers", "update")
def customers_update(ctx: CommandContext) -> RequestDescriptor:
    customer_id = ctx.args.require("id")
    body = _optional(ctx, {}, (("name", "name"), ("email", "email"), ("status", "status")))
    return ctx.request("PATCH", f"/customers/{customer_id}", body=body)


@commands.command("subscriptions", "update")
def subscriptions_update(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    subscription_id = a.require("id")
    body = _optional(ctx, {}, (("proration-billing-mode", "proration_billing_mode"),))
    if a.value("scheduled-change"):
        body["scheduled_change"] = a.json_value("scheduled-change")
    return ctx.request("PATCH", f"/subscriptions/{subscription_id}", body=body)


@commands.command("subscriptions", "cancel")
def subscriptions_cancel(ctx: CommandContext) -> RequestDescriptor:
    subscription_id = ctx.args.require("id")
    body = {"effective_from": ctx.args.value("effective-from", "next_billing_period")}
    return ctx.request("POST", f"/subscriptions/{subscription_id}/cancel", body=body)


@commands.command("subscriptions", "pause")
def subscriptions_pause(ctx: CommandContext) -> RequestDescriptor:
    subscription_id = ctx.args.require("id")
    body = _optional(ctx, {}, (("resume-at", "resume_at"),))
    return ctx.request("POST", f"/subscriptions/{subscription_id}/pause", body=body)


@commands.command("subscriptions", "resume")
def subscriptions_resume(ctx: CommandContext) -> RequestDescriptor:
    subscription_id = ctx.args.require("id")
    body = {"effective_from": ctx.args.value("effective-from", "immediately")}
    return ctx.request("POST", f"/subscriptions/{subscription_id}/resume", body=body)


@commands.command("transactions", "create")
def transactions_create(ctx: CommandContext) -> RequestDescriptor:
    ctx.args.require("items", "JSON array of {price_id, quantity}")
    body = _optional(ctx, {"items": ctx.args.json_value("items")}, (("customer-id", "customer_id"),))
    return ctx.request("POST", "/transactions", body=body)


@commands.command("discounts", "create")
def discounts_create(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    amount = a.require("amount")
    discount_type = a.require("type", "flat, flat_per_seat, percentage")
    body: dict[str, Any] = {
        "amount": amount,
        "type": discount_type,
        "description": a.value("description", "Discount"),
    }
    if a.value("code"):
        body["code"] = a.value("code")
    if a.value("max-uses"):
        body["maximum_recurring_intervals"] = a.integer("max-uses")
    if a.value("currency-code"):
        body["currency_code"] = a.value("currency-code")
    return ctx.request("POST", "/discounts", body=body)


@commands.command("adjustments", "create")
def adjustments_create(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    transaction_id = a.require("transaction-id")
    action = a.require("action", "refund, credit, chargeback")
    reason = a.require("reason")
    a.require("items", "JSON array of {item_id, type, amount}")
    body = {
        "transaction_id": transaction_id,
        "action": action,
        "reason": reason,
        "items": a.json_value("items"),
    }
    return ctx.request("POST", "/adjustments", body=body)


@commands.command("events", "types")
def events_types(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/event-types")


@commands.command("notifications", "replay")
def notifications_replay(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("POST", f"/notifications/{ctx.args.require('id')}/replay")


TOOL = ApiTool(
    name="paddle",
    description="Paddle Billing API",
    base_url=base_url,
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": bearer(API_KEY)},
    commands=commands,
)
