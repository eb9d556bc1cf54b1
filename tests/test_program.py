from __future__ import annotations

import json

import httpx
import pytest

from adapters.tools import calendly, hotjar, klaviyo
from cli.program import run_program

CALENDLY_ENV = {"CALENDLY_API_KEY": "cal-secret-key"}


def _run(capsys, tool, argv, environ, **kwargs):
    code = run_program(tool, argv, environ=environ, **kwargs)
    out, err = capsys.readouterr()
    return code, out, err


def test_missing_credential_exits_1_before_anything_else(capsys, recorder, settings):
    code, out, err = _run(capsys, calendly.TOOL, ["users", "me"], {}, settings=settings, transport=recorder.transport)
    assert code == 1
    assert out == ""
    assert json.loads(err) == {"error": "CALENDLY_API_KEY environment variable required"}
    assert recorder.requests == []


def test_empty_credential_counts_as_missing(capsys, settings):
    code, _, err = _run(capsys, calendly.TOOL, ["users", "me"], {"CALENDLY_API_KEY": ""}, settings=settings)
    assert code == 1
    assert "CALENDLY_API_KEY" in json.loads(err)["error"]


def test_missing_credentials_joint_message(capsys, settings):
    code, _, err = _run(capsys, hotjar.TOOL, ["sites", "list"], {}, settings=settings)
    assert code == 1
    assert json.loads(err) == {"error": "HOTJAR_CLIENT_ID and HOTJAR_CLIENT_SECRET environment variables required"}


def test_dry_run_is_idempotent_and_secret_free(capsys, recorder, settings):
    argv = ["users", "me", "--dry-run"]
    first = _run(capsys, calendly.TOOL, argv, CALENDLY_ENV, settings=settings, transport=recorder.transport)
    second = _run(capsys, calendly.TOOL, argv, CALENDLY_ENV, settings=settings, transport=recorder.transport)

    assert first == second
    code, out, err = first
    assert code == 0
    assert err == ""
    assert "cal-secret-key" not in out
    assert json.loads(out) == {
        "_dry_run": True,
        "method": "GET",
        "url": "https://api.calendly.com/users/me",
        "headers": {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": "***",
        },
    }
    assert recorder.requests == []


def test_output_is_pretty_printed(capsys, settings):
    _, out, _ = _run(capsys, calendly.TOOL, ["users", "me", "--dry-run"], CALENDLY_ENV, settings=settings)
    assert out.startswith('{\n  "_dry_run": true,')


def test_missing_flag_is_a_result_not_a_failure(capsys, recorder, settings):
    code, out, err = _run(
        capsys, calendly.TOOL, ["events", "get"], CALENDLY_ENV, settings=settings, transport=recorder.transport
    )
    assert code == 0
    assert err == ""
    assert json.loads(out) == {"error": "--uuid required"}
    assert recorder.requests == []


def test_unknown_command_prints_usage(capsys, settings):
    code, out, _ = _run(capsys, calendly.TOOL, ["nope"], CALENDLY_ENV, settings=settings)
    payload = json.loads(out)
    assert code == 0
    assert payload["error"] == "Unknown command"
    assert set(payload["usage"]) == {"users", "event-types", "events", "availability", "webhooks", "org", "options"}


def test_no_arguments_prints_usage(capsys, settings):
    code, out, _ = _run(capsys, calendly.TOOL, [], CALENDLY_ENV, settings=settings)
    assert code == 0
    assert json.loads(out)["error"] == "Unknown command"


def test_unknown_subcommand_lists_choices(capsys, settings):
    _, out, _ = _run(capsys, calendly.TOOL, ["users", "them"], CALENDLY_ENV, settings=settings)
    assert json.loads(out) == {"error": "Unknown users subcommand. Use: me", "usage": "users me"}


def test_transport_failure_exits_1(capsys, make_recorder, settings):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    recorder = make_recorder(refuse)
    code, out, err = _run(
        capsys, calendly.TOOL, ["users", "me"], CALENDLY_ENV, settings=settings, transport=recorder.transport
    )
    assert code == 1
    assert out == ""
    assert json.loads(err) == {"error": "connection refused"}


def test_live_result_is_printed(capsys, make_recorder, settings):
    recorder = make_recorder(httpx.Response(200, json={"resource": {"name": "Zoë Ångström"}}))
    code, out, _ = _run(
        capsys, calendly.TOOL, ["users", "me"], CALENDLY_ENV, settings=settings, transport=recorder.transport
    )
    assert code == 0
    assert "Zoë Ångström" in out
    assert recorder.requests[0].headers["Authorization"] == "Bearer cal-secret-key"


def test_api_error_status_still_exits_0(capsys, make_recorder, settings):
    recorder = make_recorder(httpx.Response(401, json={"title": "Unauthenticated"}))
    code, out, _ = _run(
        capsys, calendly.TOOL, ["users", "me"], CALENDLY_ENV, settings=settings, transport=recorder.transport
    )
    assert code == 0
    assert json.loads(out) == {"title": "Unauthenticated"}


def test_klaviyo_list_dry_run(capsys, settings):
    _, out, _ = _run(
        capsys, klaviyo.TOOL, ["campaigns", "list", "--dry-run"], {"KLAVIYO_API_KEY": "pk_x"}, settings=settings
    )
    payload = json.loads(out)
    assert payload["method"] == "GET"
    assert payload["url"] == "https://a.klaviyo.com/api/campaigns/"
    assert payload["headers"]["revision"] == "2024-10-15"
    assert payload["headers"]["Authorization"] == "***"


def test_csv_flag_becomes_json_list(capsys, settings):
    argv = [
        "webhooks", "create", "--url", "https://hook.example.com", "--events", "a,b,c",
        "--organization", "https://api.calendly.com/organizations/X", "--dry-run",
    ]
    _, out, _ = _run(capsys, calendly.TOOL, argv, CALENDLY_ENV, settings=settings)
    body = json.loads(out)["body"]
    assert body["events"] == ["a", "b", "c"]
    assert body["scope"] == "organization"


def test_non_ascii_flag_values_survive(capsys, settings):
    argv = ["events", "cancel", "--uuid", "u1", "--reason", "Désolé 日本", "--dry-run"]
    _, out, _ = _run(capsys, calendly.TOOL, argv, CALENDLY_ENV, settings=settings)
    assert "Désolé 日本" in out
    assert json.loads(out)["body"] == {"reason": "Désolé 日本"}


@pytest.mark.parametrize(
    ("flag_value", "problem"), [("abc", "must be a number"), ("1.5", "must be an integer")]
)
def test_bad_integer_flag(capsys, settings, flag_value, problem):
    argv = ["event-types", "list", "--user", "u", "--count", flag_value]
    code, out, _ = _run(capsys, calendly.TOOL, argv, CALENDLY_ENV, settings=settings)
    assert code == 0
    assert json.loads(out) == {"error": f"--count {problem}"}
