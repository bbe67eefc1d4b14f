"""Tests for DebugUtil quiet/loud output."""

import logging

import pytest

from helpers.debug_util import DEBUG_MODE_ENV, DebugUtil


def test_defaults_to_quiet(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DEBUG_MODE_ENV, raising=False)
    util = DebugUtil()
    assert util.debug_mode() == "quiet"
    assert util.is_quiet()


@pytest.mark.parametrize("value,expected", [("loud", "loud"), ("LOUD", "loud"), ("bogus", "quiet")])
def test_reads_environment(monkeypatch: pytest.MonkeyPatch, value: str, expected: str) -> None:
    monkeypatch.setenv(DEBUG_MODE_ENV, value)
    assert DebugUtil().debug_mode() == expected


def test_explicit_mode_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(DEBUG_MODE_ENV, "quiet")
    assert DebugUtil("loud").is_loud()


def test_loud_prints(capsys: pytest.CaptureFixture[str]) -> None:
    DebugUtil("loud").debugMessage("aligned", 3, "tokens")
    assert capsys.readouterr().out == "[DEBUG] aligned 3 tokens\n"


def test_quiet_logs(caplog: pytest.LogCaptureFixture, capsys: pytest.CaptureFixture[str]) -> None:
    util = DebugUtil("quiet")
    with caplog.at_level(logging.DEBUG, logger="DebugUtil"):
        util.debugMessage("session finalized")
    assert "session finalized" in caplog.text
    assert "[DEBUG]" not in capsys.readouterr().out


def test_set_mode() -> None:
    util = DebugUtil("loud")
    util.set_mode("Quiet")
    assert util.is_quiet()
    util.set_mode("nonsense")
    assert util.is_quiet()
