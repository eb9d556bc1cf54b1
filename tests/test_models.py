from __future__ import annotations

import pytest
from pydantic import SecretStr, ValidationError

from core.args import parse_args
from core.domain.models import CredentialSet, RequestDescriptor
from core.errors import FlagValueError, MissingFlagError, UsageError


def test_require_missing_and_bare_flag():
    with pytest.raises(MissingFlagError, match=r"^--uuid required$"):
        parse_args([]).require("uuid")
    with pytest.raises(MissingFlagError, match=r"^--uuid required \(event UUID\)$"):
        parse_args(["--uuid"]).require("uuid", "event UUID")


def test_integer_and_number():
    args = parse_args(["--count", "25", "--ratio", "0.5", "--big", "1e3"])
    assert args.integer("count") == 25
    assert args.number("ratio") == 0.5
    assert args.integer("big") == 1000
    assert args.integer("missing", 20) == 20


@pytest.mark.parametrize("raw", ["abc", "1_000", "nan", "inf"])
def test_non_numeric_values_are_rejected(raw):
    with pytest.raises(FlagValueError, match=r"^--count must be a number$"):
        parse_args(["--count", raw]).number("count")


def test_integer_rejects_fractions():
    with pytest.raises(FlagValueError, match="must be an integer"):
        parse_args(["--count", "2.5"]).integer("count")


def test_csv_keeps_order():
    args = parse_args(["--events", "a,b,c", "--ids", " 1, 2 "])
    assert args.csv("events") == ["a", "b", "c"]
    assert args.csv("ids", strip=True) == ["1", "2"]
    assert args.csv_numbers("ids") == [1, 2]
    assert args.csv("nope") is None


def test_json_value():
    args = parse_args(["--items", '[{"price_id": "pri_1", "quantity": 2}]', "--bad", "{oops"])
    assert args.json_value("items") == [{"price_id": "pri_1", "quantity": 2}]
    with pytest.raises(FlagValueError, match=r"^--bad must be valid JSON: "):
        args.json_value("bad")


def test_argument_after_subcommand():
    args = parse_args(["campaigns", "get", "c1"])
    assert args.argument("campaign_id") == "c1"
    with pytest.raises(UsageError, match=r"<campaign_id> argument required"):
        parse_args(["campaigns", "get"]).argument("campaign_id")


def test_parsed_arguments_are_frozen():
    args = parse_args(["x"])
    with pytest.raises(ValidationError):
        args.positionals = ("y",)


def test_credential_set_never_renders_values():
    creds = CredentialSet(values={"API_KEY": SecretStr("sk-live-123")})
    assert creds.get("API_KEY") == "sk-live-123"
    assert creds.get("OTHER") is None
    assert "sk-live-123" not in repr(creds)
    assert "sk-live-123" not in creds.model_dump_json()


def test_request_descriptor_defaults():
    descriptor = RequestDescriptor(method="GET", url="https://api.example.com/x")
    assert descriptor.headers == {}
    assert descriptor.body is None
    assert descriptor.auth == "default"
