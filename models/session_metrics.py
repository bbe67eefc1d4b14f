"""Timing and speed/accuracy metrics for a completed typing session.

All ratios are fractions in [0, 1]. Every statistic over an empty sample is
0.0, never NaN.
"""

from __future__ import annotations

import logging
import math
import time
from collections import defaultdict
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, field_serializer, field_validator

from models.alignment import AlignmentResult
from models.analysis_config import AnalysisConfig
from models.key_event import KeyEvent
from models.text_normalizer import count_words, normalize_whitespace, split_words

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000.0


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sample."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """Median, averaging the two middle elements for even counts."""
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2.0


def percentile(values: Sequence[float], p: float) -> float:
    """Nearest-rank percentile: element ``ceil(p/100 * n) - 1`` of the sorted sample."""
    if not values:
        return 0.0
    ordered = sorted(values)
    index = math.ceil(p / 100.0 * len(ordered)) - 1
    index = min(max(index, 0), len(ordered) - 1)
    return float(ordered[index])


def clamp_fraction(value: float) -> float:
    """Clamp a ratio into [0, 1]."""
    return min(1.0, max(0.0, value))


class TimingStats(BaseModel):
    """Distribution summary for a set of millisecond durations."""

    count: int = Field(default=0, ge=0)
    mean: float = Field(default=0.0, ge=0)
    median: float = Field(default=0.0, ge=0)
    p95: float = Field(default=0.0, ge=0)

    model_config = {
        "frozen": True,
    }

    @classmethod
    def from_values(cls, values: Sequence[float], p: float = 95.0) -> "TimingStats":
        """Summarise a sample of durations."""
        return cls(
            count=len(values),
            mean=mean(values),
            median=median(values),
            p95=percentile(values, p),
        )


class KeyStats(BaseModel):
    """Per-physical-key breakdown."""

    count: int = Field(ge=0)
    mean_hold: float = Field(default=0.0, ge=0)
    mean_lag: float = Field(default=0.0, ge=0)

    model_config = {
        "frozen": True,
    }


class SessionMetrics(BaseModel):
    """Immutable speed, accuracy and timing aggregate for one session."""

    duration_ms: float = Field(ge=0)
    first_press_time: float
    last_release_time: float
    total_keys: int = Field(ge=0)
    character_keys: int = Field(default=0, ge=0)
    backspace_count: int = Field(ge=0)
    raw_wpm5: float = Field(ge=0)
    char_wpm: float = Field(ge=0)
    word_wpm: float = Field(ge=0)
    net_wpm5: float = Field(ge=0)
    char_accuracy: float = Field(ge=0, le=1)
    word_accuracy: float = Field(ge=0, le=1)
    normalized_char_accuracy: float = Field(ge=0, le=1)
    normalized_word_accuracy: float = Field(default=0.0, ge=0, le=1)
    char_error_count: int = Field(default=0, ge=0)
    word_error_count: int = Field(default=0, ge=0)
    positional_word_errors: int = Field(
        default=0, ge=0, description="Typed words differing from the target word at the same index"
    )
    hold: TimingStats = Field(default_factory=TimingStats)
    lag: TimingStats = Field(default_factory=TimingStats)
    per_key: Mapping[str, KeyStats] = Field(default_factory=dict, validate_default=True)

    model_config = {
        "frozen": True,
    }

    @field_validator("per_key")
    @classmethod
    def freeze_per_key(cls, v: Mapping[str, KeyStats]) -> Mapping[str, KeyStats]:
        """Store the per-key breakdown as a read-only mapping."""
        return MappingProxyType(dict(v))

    @field_serializer("per_key")
    def serialize_per_key(self, v: Mapping[str, KeyStats]) -> Dict[str, KeyStats]:
        return dict(v)

    @property
    def minutes(self) -> float:
        """Session duration in minutes."""
        return self.duration_ms / MS_PER_MINUTE

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the metrics to a JSON-ready dict."""
        return self.model_dump(mode="json")


def positional_word_errors(typed_text: str, target_text: str) -> int:
    """Count typed words that differ from the target word at the same position.

    Both texts are split on single spaces; typed words beyond the end of the
    target all count as errors and missing trailing words are not counted.
    """
    target_words = target_text.split(" ")
    errors = 0
    for index, word in enumerate(typed_text.split(" ")):
        if index >= len(target_words) or word != target_words[index]:
            errors += 1
    return errors


class MetricsCalculator:
    """Derives SessionMetrics from key events, texts and alignments."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        """Initialize the calculator.

        Args:
            config: Analysis tunables; defaults to AnalysisConfig().
        """
        self.config = config or AnalysisConfig()

    def session_bounds(
        self, events: Sequence[KeyEvent], now: Optional[float] = None
    ) -> tuple[float, float]:
        """Return (first press time, last release time) across the events.

        Without events both default to ``now``. Without any release the last
        press stands in for the last release.
        """
        if not events:
            stamp = now if now is not None else time.time() * 1000.0
            return stamp, stamp
        first_press = min(event.press_time for event in events)
        releases = [event.release_time for event in events if event.release_time is not None]
        if releases:
            last_release = max(releases)
        else:
            last_release = max(event.press_time for event in events)
        return first_press, max(first_press, last_release)

    def per_key_stats(self, events: Sequence[KeyEvent]) -> Dict[str, KeyStats]:
        """Group events by physical code (falling back to the logical key)."""
        groups: Dict[str, List[KeyEvent]] = defaultdict(list)
        for event in events:
            groups[event.code or event.key].append(event)
        return {
            code: KeyStats(
                count=len(group),
                mean_hold=mean(
                    [e.hold_time for e in group if e.hold_time is not None and e.hold_time > 0]
                ),
                mean_lag=mean([e.lag_time for e in group if e.lag_time >= 0]),
            )
            for code, group in groups.items()
        }

    def calculate(
        self,
        *,
        events: Sequence[KeyEvent],
        typed_text: str,
        target_text: str,
        char_alignment: AlignmentResult,
        word_alignment: AlignmentResult,
        normalized_char_alignment: AlignmentResult,
        normalized_word_alignment: AlignmentResult,
        now: Optional[float] = None,
    ) -> SessionMetrics:
        """Compute the full metrics aggregate for one session."""
        cfg = self.config
        first_press, last_release = self.session_bounds(events, now)
        duration_ms = max(0.0, last_release - first_press)
        minutes = max(duration_ms / MS_PER_MINUTE, cfg.minutes_epsilon)

        typed_len = len(typed_text)
        raw_wpm5 = (typed_len / cfg.chars_per_word) / minutes
        char_wpm = typed_len / minutes
        word_wpm = count_words(typed_text) / minutes
        net_wpm5 = max(0.0, raw_wpm5 - word_alignment.errors / minutes)

        char_denominator = max(len(target_text), typed_len, 1)
        target_words = len(split_words(target_text, cfg.word_separator))
        typed_words = len(split_words(typed_text, cfg.word_separator))
        word_denominator = max(target_words, typed_words, 1)
        normalized_target_len = len(normalize_whitespace(target_text))
        normalized_word_denominator = max(count_words(target_text), count_words(typed_text), 1)

        holds = [e.hold_time for e in events if e.hold_time is not None and e.hold_time > 0]
        lags = [e.lag_time for e in events if e.lag_time >= 0]

        metrics = SessionMetrics(
            duration_ms=duration_ms,
            first_press_time=first_press,
            last_release_time=last_release,
            total_keys=len(events),
            character_keys=sum(1 for e in events if e.is_character_key),
            backspace_count=sum(1 for e in events if e.key == cfg.backspace_key),
            raw_wpm5=raw_wpm5,
            char_wpm=char_wpm,
            word_wpm=word_wpm,
            net_wpm5=net_wpm5,
            char_accuracy=clamp_fraction(char_alignment.matches / char_denominator),
            word_accuracy=clamp_fraction(word_alignment.matches / word_denominator),
            normalized_char_accuracy=clamp_fraction(
                (normalized_target_len - normalized_char_alignment.distance)
                / max(normalized_target_len, 1)
            ),
            normalized_word_accuracy=clamp_fraction(
                normalized_word_alignment.matches / normalized_word_denominator
            ),
            char_error_count=char_alignment.distance,
            word_error_count=word_alignment.distance,
            positional_word_errors=positional_word_errors(typed_text, target_text),
            hold=TimingStats.from_values(holds, cfg.percentile),
            lag=TimingStats.from_values(lags, cfg.percentile),
            per_key=self.per_key_stats(events),
        )
        logger.debug(
            "Metrics: %d keys over %.0f ms, char accuracy %.3f",
            metrics.total_keys,
            metrics.duration_ms,
            metrics.char_accuracy,
        )
        return metrics
