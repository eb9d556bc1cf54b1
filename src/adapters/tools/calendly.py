"""Calendly API v2: users, event types, scheduled events, availability, webhooks."""

from __future__ import annotations

from adapters.auth import bearer
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.errors import UsageError
from core.tool import ApiTool

API_KEY = "CALENDLY_API_KEY"

commands = CommandTable(
    usage={
        "users": "users me",
        "event-types": "event-types [list --user <uri> | get --uuid <id>]",
        "events": "events [list --user <uri> | get --uuid <id> | cancel --uuid <id> | invitees --uuid <id>]",
        "availability": (
            "availability [times --event-type <uri> --start-time <iso> --end-time <iso> "
            "| busy --user <uri> --start-time <iso> --end-time <iso>]"
        ),
        "webhooks": (
            "webhooks [list --organization <uri> "
            "| create --url <url> --events <e1,e2> --organization <uri> | delete --uuid <id>]"
        ),
        "org": "org [members --organization <uri>]",
    },
    notes={"options": "--count <n> --page-token <token> --status <active|canceled>"},
)


def _owner(ctx: CommandContext) -> dict[str, str | None]:
    user = ctx.args.value("user")
    org = ctx.args.value("organization")
    if not user and not org:
        raise UsageError("--user or --organization URI required")
    return {"user": user, "organization": org}


def _time_window(ctx: CommandContext) -> tuple[str, str]:
    start = ctx.args.value("start-time")
    end = ctx.args.value("end-time")
    if not start or not end:
        raise UsageError("--start-time and --end-time required (ISO 8601)")
    return start, end


@commands.command("users", "me")
def users_me(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/users/me")


@commands.command("event-types", "list")
def event_types_list(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    params = {
        **_owner(ctx),
        "active": a.value("active"),
        "count": a.integer("count", 20),
        "page_token": a.value("page-token"),
    }
    return ctx.request("GET", "/event_types", params=params)


@commands.command("event-types", "get")
def event_types_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/event_types/{ctx.args.require('uuid')}")


@commands.command("events", "list")
def events_list(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    params = {
        **_owner(ctx),
        "min_start_time": a.value("min-start"),
        "max_start_time": a.value("max-start"),
        "status": a.value("status"),
        "count": a.integer("count", 20),
        "page_token": a.value("page-token"),
        "sort": a.value("sort"),
    }
    return ctx.request("GET", "/scheduled_events", params=params)


@commands.command("events", "get")
def events_get(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", f"/scheduled_events/{ctx.args.require('uuid')}")


@commands.command("events", "cancel")
def events_cancel(ctx: CommandContext) -> RequestDescriptor:
    uuid = ctx.args.require("uuid")
    body: dict[str, str] = {}
    reason = ctx.args.value("reason")
    if reason:
        body["reason"] = reason
    return ctx.request("POST", f"/scheduled_events/{uuid}/cancellation", body=body)


@commands.command("events", "invitees")
def events_invitees(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    uuid = a.require("uuid", "event UUID")
    params = {
        "count": a.integer("count", 20),
        "page_token": a.value("page-token"),
        "email": a.value("email"),
        "status": a.value("status"),
    }
    return ctx.request("GET", f"/scheduled_events/{uuid}/invitees", params=params)


@commands.command("availability", "times")
def availability_times(ctx: CommandContext) -> RequestDescriptor:
    event_type = ctx.args.require("event-type", "event type URI")
    start, end = _time_window(ctx)
    params = {"event_type": event_type, "start_time": start, "end_time": end}
    return ctx.request("GET", "/event_type_available_times", params=params)


@commands.command("availability", "busy")
def availability_busy(ctx: CommandContext) -> RequestDescriptor:
    user = ctx.args.require("user", "user URI")
    start, end = _time_window(ctx)
    return ctx.request("GET", "/user_busy_times", params={"user": user, "start_time": start, "end_time": end})


@commands.command("webhooks", "list")
def webhooks_list(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    params = {
        "organization": a.require("organization", "organization URI"),
        "scope": a.value("scope", "organization"),
        "count": a.integer("count", 20),
        "page_token": a.value("page-token"),
    }
    return ctx.request("GET", "/webhook_subscriptions", params=params)


@commands.command("webhooks", "create")
def webhooks_create(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    url = a.value("url")
    events = a.csv("events")
    org = a.value("organization")
    if not url or not events or not org:
        raise UsageError("--url, --events (comma-separated), and --organization required")
    body = {"url": url, "events": events, "organization": org, "scope": a.value("scope", "organization")}
    if a.value("user"):
        body["user"] = a.value("user")
    return ctx.request("POST", "/webhook_subscriptions", body=body)


@commands.command("webhooks", "delete")
def webhooks_delete(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", f"/webhook_subscriptions/{ctx.args.require('uuid')}")


@commands.command("org", "members")
def org_members(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    params = {
        "organization": a.require("organization", "organization URI"),
        "count": a.integer("count", 20),
        "page_token": a.value("page-token"),
    }
    return ctx.request("GET", "/organization_memberships", params=params)


TOOL = ApiTool(
    name="calendly",
    description="Calendly scheduling API",
    base_url="https://api.calendly.com",
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": bearer(API_KEY)},
    commands=commands,
)
