from __future__ import annotations

import pytest

from core.args import parse_args
from core.dispatch import CommandContext, CommandTable, build_url
from core.domain.models import CredentialSet, RequestDescriptor

BASE = "https://api.example.com"


def _table() -> CommandTable:
    table = CommandTable(usage={"users": "users me", "send": "send --to <email>"}, notes={"options": "--dry-run"})

    @table.command("users", "me")
    def users_me(ctx: CommandContext) -> RequestDescriptor:
        return ctx.request("GET", "/users/me")

    @table.command("users", "get")
    def users_get(ctx: CommandContext) -> RequestDescriptor:
        return ctx.request("GET", f"/users/{ctx.args.require('id')}")

    @table.command("send")
    def send(ctx: CommandContext) -> RequestDescriptor:
        return ctx.request("POST", "/send", body={"to": ctx.args.require("to"), "sub": ctx.args.subcommand})

    return table


def _ctx(argv: list[str]) -> CommandContext:
    return CommandContext(
        args=parse_args(argv),
        credentials=CredentialSet(),
        base_url=BASE,
        default_headers={"Accept": "application/json"},
    )


def test_dispatch_builds_descriptor():
    descriptor = _table().dispatch(_ctx(["users", "me"]))
    assert isinstance(descriptor, RequestDescriptor)
    assert descriptor.method == "GET"
    assert descriptor.url == f"{BASE}/users/me"
    assert descriptor.headers == {"Accept": "application/json"}


def test_unknown_command_returns_usage():
    result = _table().dispatch(_ctx(["nope"]))
    assert result == {
        "error": "Unknown command",
        "usage": {"users": "users me", "send": "send --to <email>", "options": "--dry-run"},
    }


def test_no_command_is_unknown_command():
    assert _table().dispatch(_ctx([]))["error"] == "Unknown command"


def test_unknown_subcommand_lists_valid_ones():
    result = _table().dispatch(_ctx(["users", "delete"]))
    assert result == {"error": "Unknown users subcommand. Use: me, get", "usage": "users me"}


def test_missing_subcommand_is_unknown_subcommand():
    assert _table().dispatch(_ctx(["users"]))["error"] == "Unknown users subcommand. Use: me, get"


def test_command_level_handler_serves_any_subcommand():
    table = _table()
    bare = table.dispatch(_ctx(["send", "--to", "a@b.c"]))
    assert bare.body == {"to": "a@b.c", "sub": None}
    odd = table.dispatch(_ctx(["send", "whatever", "--to", "a@b.c"]))
    assert odd.body == {"to": "a@b.c", "sub": "whatever"}


def test_usage_errors_become_error_payloads():
    assert _table().dispatch(_ctx(["users", "get"])) == {"error": "--id required"}


def test_operations_are_introspectable():
    assert _table().operations() == [("users", "me"), ("users", "get"), ("send", None)]


def test_duplicate_registration_is_rejected():
    table = _table()
    with pytest.raises(ValueError, match="duplicate"):
        table.command("users", "me")(lambda ctx: ctx.request("GET", "/x"))


def test_build_url_drops_empty_params():
    assert build_url(BASE, "/x") == f"{BASE}/x"
    assert build_url(BASE, "/x", {"a": None}) == f"{BASE}/x"
    assert build_url(BASE, "/x", {"a": 1, "b": None, "c": "d e"}) == f"{BASE}/x?a=1&c=d+e"


def test_build_url_appends_to_existing_query():
    assert build_url(f"{BASE}/x?type=a", "", {"key": "***"}) == f"{BASE}/x?type=a&key=***"


def test_build_url_encodes_brackets():
    assert build_url(BASE, "/profiles/", {"page[size]": 5}) == f"{BASE}/profiles/?page%5Bsize%5D=5"
