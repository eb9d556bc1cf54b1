"""Klaviyo API (JSON:API flavour, pinned revision header)."""

from __future__ import annotations

from adapters.auth import HeaderAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.tool import JSON_HEADERS, ApiTool

API_KEY = "KLAVIYO_API_KEY"
REVISION = "2024-10-15"

commands = CommandTable(
    usage={
        "profiles": "profiles [list | get --id <id> | create --email <email> | update --id <id>]",
        "lists": (
            "lists [list | get --id <id> | create --name <name> | delete --id <id> "
            "| add-profiles --id <list-id> --profiles <id1,id2> | remove-profiles --id <list-id> --profiles <id1,id2>]"
        ),
        "events": "events [list | get --id <id> | create --metric <name> --email <email>]",
        "campaigns": "campaigns [list | get --id <id>]",
        "flows": "flows [list | get --id <id> | update --id <id> --status <status>]",
        "metrics": "metrics [list | get --id <id>]",
        "segments": "segments [list | get --id <id>]",
        "templates": "templates [list | get --id <id>]",
    },
    notes={"options": "--filter <filter> --page-size <n> --page-cursor <cursor>"},
)


def _register_list(resource: str, *, filterable: bool) -> None:
    @commands.command(resource, "list")
    def list_(ctx: CommandContext) -> RequestDescriptor:
        a = ctx.args
        params = {
            "filter": a.value("filter") if filterable else None,
            "sort": a.value("sort") if resource == "profiles" else None,
            "page[size]": a.value("page-size"),
            "page[cursor]": a.value("page-cursor") if resource == "profiles" else None,
        }
        return ctx.request("GET", f"/{resource}/", params=params)


def _register_get(resource: str) -> None:
    @commands.command(resource, "get")
    def get(ctx: CommandContext) -> RequestDescriptor:
        return ctx.request("GET", f"/{resource}/{ctx.args.require('id')}/")


for _resource, _filterable in (
    ("profiles", True),
    ("lists", False),
    ("events", True),
    ("campaigns", True),
    ("flows", True),
    ("metrics", False),
    ("segments", False),
    ("templates", True),
):
    _register_list(_resource, filterable=_filterable)
    _register_get(_resource)


def _profile_attributes(ctx: CommandContext, email: str | None) -> dict[str, str]:
    a = ctx.args
    attributes: dict[str, str] = {}
    if email:
        attributes["email"] = email
    for flag, field in (("first-name", "first_name"), ("last-name", "last_name"), ("phone", "phone_number")):
        value = a.value(flag)
        if value:
            attributes[field] = value
    return attributes


@commands.command("profiles", "create")
def profiles_create(ctx: CommandContext) -> RequestDescriptor:
    email = ctx.args.require("email")
    body = {"data": {"type": "profile", "attributes": _profile_attributes(ctx, email)}}
    return ctx.request("POST", "/profiles/", body=body)


@commands.command("profiles", "update")
def profiles_update(ctx: CommandContext) -> RequestDescriptor:
    profile_id = ctx.args.require("id")
    attributes = _profile_attributes(ctx, ctx.args.value("email"))
    body = {"data": {"type": "profile", "id": profile_id, "attributes": attributes}}
    return ctx.request("PATCH", f"/profiles/{profile_id}/", body=body)


@commands.command("lists", "create")
def lists_create(ctx: CommandContext) -> RequestDescriptor:
    body = {"data": {"type": "list", "attributes": {"name": ctx.args.require("name")}}}
    return ctx.request("POST", "/lists/", body=body)


@commands.command("lists", "delete")
def lists_delete(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("DELETE", f"/lists/{ctx.args.require('id')}/")


def _list_membership(ctx: CommandContext, method: str) -> RequestDescriptor:
    list_id = ctx.args.require("id", "list ID")
    profile_ids = ctx.args.csv("profiles")
    if profile_ids is None:
        profile_ids = [ctx.args.require("profiles", "comma-separated profile IDs")]
    body = {"data": [{"type": "profile", "id": pid} for pid in profile_ids]}
    return ctx.request(method, f"/lists/{list_id}/relationships/profiles/", body=body)


@commands.command("lists", "add-profiles")
def lists_add_profiles(ctx: CommandContext) -> RequestDescriptor:
    return _list_membership(ctx, "POST")


@commands.command("lists", "remove-profiles")
def lists_remove_profiles(ctx: CommandContext) -> RequestDescriptor:
    return _list_membership(ctx, "DELETE")


@commands.command("events", "create")
def events_create(ctx: CommandContext) -> RequestDescriptor:
    """Track an event; `--property k:v,k2:v2` adds string properties."""

    a = ctx.args
    metric = a.require("metric", "metric name")
    email = a.require("email")
    properties: dict[str, object] = {}
    value = a.number("value")
    if value is not None:
        properties["value"] = value
    for pair in a.csv("property") or []:
        key, _, val = pair.partition(":")
        if key and val:
            properties[key] = val.split(":", 1)[0]

    attributes: dict[str, object] = {
        "metric": {"data": {"type": "metric", "attributes": {"name": metric}}},
        "profile": {"data": {"type": "profile", "attributes": {"email": email}}},
        "properties": properties,
    }
    if a.value("time"):
        attributes["time"] = a.value("time")
    return ctx.request("POST", "/events/", body={"data": {"type": "event", "attributes": attributes}})


@commands.command("flows", "update")
def flows_update(ctx: CommandContext) -> RequestDescriptor:
    flow_id = ctx.args.require("id")
    attributes: dict[str, str] = {}
    if ctx.args.value("status"):
        attributes["status"] = ctx.args.value("status")
    body = {"data": {"type": "flow", "id": flow_id, "attributes": attributes}}
    return ctx.request("PATCH", f"/flows/{flow_id}/", body=body)


TOOL = ApiTool(
    name="klaviyo",
    description="Klaviyo email/SMS marketing API",
    base_url="https://a.klaviyo.com/api",
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": HeaderAuth("Authorization", API_KEY, "Klaviyo-API-Key {}")},
    commands=commands,
    headers={**JSON_HEADERS, "revision": REVISION},
)
