from __future__ import annotations

from core.args import parse_args


def test_command_subcommand_and_flags():
    args = parse_args(["events", "list", "--user", "https://x/u/1", "--count", "5"])
    assert args.positionals == ("events", "list")
    assert args.flags == {"user": "https://x/u/1", "count": "5"}
    assert args.command == "events"
    assert args.subcommand == "list"


def test_flag_followed_by_flag_is_boolean():
    args = parse_args(["--a", "--b", "x"])
    assert args.flags == {"a": True, "b": "x"}
    assert args.positionals == ()


def test_trailing_flag_is_boolean():
    args = parse_args(["users", "me", "--dry-run"])
    assert args.flags == {"dry-run": True}
    assert args.is_set("dry-run")


def test_positionals_keep_order_around_flags():
    args = parse_args(["campaigns", "--limit", "3", "get", "abc", "def"])
    assert args.positionals == ("campaigns", "get", "abc", "def")
    assert args.rest == ("abc", "def")


def test_repeated_flag_keeps_last_value():
    assert parse_args(["--id", "1", "--id", "2"]).flags == {"id": "2"}


def test_single_dash_tokens_are_positionals():
    args = parse_args(["-v", "x"])
    assert args.positionals == ("-v", "x")
    assert args.flags == {}


def test_empty_string_after_flag_is_its_value():
    args = parse_args(["--name", ""])
    assert args.flags == {"name": ""}
    assert args.value("name") is None


def test_empty_argv():
    args = parse_args([])
    assert args.command is None
    assert args.subcommand is None
    assert args.flags == {}
