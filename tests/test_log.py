from __future__ import annotations

import json

import pytest

from core.log import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_level():
    yield
    configure_logging("WARNING")


def test_debug_lines_are_json(capsys):
    configure_logging("DEBUG")
    get_logger("tests").debug("request.send method=%s", "GET", extra={"tool": "calendly"})
    line = capsys.readouterr().err.strip()
    payload = json.loads(line)
    assert payload["level"] == "DEBUG"
    assert payload["logger"] == "mkt_clis.tests"
    assert payload["msg"] == "request.send method=GET"
    assert payload["tool"] == "calendly"


def test_default_level_keeps_stderr_quiet(capsys):
    configure_logging(None)
    get_logger("tests").info("not shown")
    assert capsys.readouterr().err == ""


def test_unknown_level_falls_back_to_warning():
    logger = configure_logging("chatty")
    assert logger.level == 30


def test_plain_text_mode(capsys):
    configure_logging("INFO", json_mode=False)
    get_logger("tests").info("hello")
    assert "INFO mkt_clis.tests hello" in capsys.readouterr().err
