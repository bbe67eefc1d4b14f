"""Tests for AnalysisConfig defaults and environment overrides."""

import pytest
from pydantic import ValidationError

from models.analysis_config import AnalysisConfig


def test_defaults() -> None:
    config = AnalysisConfig()
    assert config.chars_per_word == 5
    assert config.percentile == 95.0
    assert config.backspace_key == "Backspace"
    assert config.word_separator == " "


@pytest.mark.parametrize(
    "field,value",
    [
        ("chars_per_word", 0),
        ("percentile", 0),
        ("percentile", 101),
        ("minutes_epsilon", 0),
        ("word_separator", ""),
        ("unknown_field", 1),
    ],
)
def test_invalid_values_rejected(field: str, value: object) -> None:
    with pytest.raises(ValidationError):
        AnalysisConfig(**{field: value})


def test_from_env_without_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CHARS_PER_WORD", "PERCENTILE", "MINUTES_EPSILON"):
        monkeypatch.delenv(f"KEYSTROKE_ANALYSIS_{name}", raising=False)
    assert AnalysisConfig.from_env() == AnalysisConfig()


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KEYSTROKE_ANALYSIS_CHARS_PER_WORD", "6")
    monkeypatch.setenv("KEYSTROKE_ANALYSIS_PERCENTILE", " 90 ")
    monkeypatch.setenv("KEYSTROKE_ANALYSIS_MINUTES_EPSILON", "")
    config = AnalysisConfig.from_env()
    assert config.chars_per_word == 6
    assert config.percentile == 90.0
    assert config.minutes_epsilon == AnalysisConfig().minutes_epsilon


def test_from_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KEYSTROKE_ANALYSIS_CHARS_PER_WORD", "five")
    with pytest.raises(ValidationError):
        AnalysisConfig.from_env()
