"""Keystroke recorder for pairing key-down/key-up events into timed key events."""

import logging
from typing import Iterable, List, Optional

from models.key_event import KeyEvent, KeyEventType, RawKeyEvent, is_character_key

logger = logging.getLogger(__name__)


class KeystrokeRecorder:
    """Accumulates raw keyboard events into an ordered list of KeyEvent records.

    Lag fields for a new press are computed from two rolling cursors: the time
    of the previous press and the time of the most recent release. Lags keep
    their sign: a press stamped before the last release gets a negative lag,
    which the metrics leave out. A release is matched to the most recent
    still-open event with the same key and code; releases without a matching
    open press are ignored.
    """

    def __init__(self) -> None:
        """Initialize an empty recorder at generation 0."""
        self.events: List[KeyEvent] = []
        self.last_press_time: Optional[float] = None
        self.last_release_time: Optional[float] = None
        self.generation: int = 0
        self._typing_started = False

    @property
    def has_typing_started(self) -> bool:
        """True once any single-character key has been pressed since the last reset."""
        return self._typing_started

    def _find_open(self, key: str, code: str) -> Optional[KeyEvent]:
        for event in reversed(self.events):
            if event.is_open and event.matches(key, code):
                return event
        return None

    def record_key_down(self, *, raw: RawKeyEvent, now: Optional[float] = None) -> bool:
        """Record a key press.

        Args:
            raw: The raw key-down event
            now: Press time in milliseconds; defaults to the event timestamp

        Returns:
            True if a new event was appended, False if it was coalesced as auto-repeat.
        """
        press_time = raw.timestamp if now is None else now
        if raw.repeat or self._find_open(raw.key, raw.code) is not None:
            logger.debug("Coalescing repeated key-down for %r (%s)", raw.key, raw.code)
            return False

        lag_time = 0.0
        if self.last_release_time is not None:
            lag_time = press_time - self.last_release_time
        total_lag_time = 0.0
        if self.last_press_time is not None:
            total_lag_time = press_time - self.last_press_time

        self.events.append(
            KeyEvent(
                key=raw.key,
                code=raw.code,
                press_time=press_time,
                lag_time=lag_time,
                total_lag_time=total_lag_time,
                alt=raw.alt,
                ctrl=raw.ctrl,
                meta=raw.meta,
                shift=raw.shift,
            )
        )
        self.last_press_time = press_time
        if not self._typing_started and is_character_key(raw.key):
            self._typing_started = True
        return True

    def record_key_up(self, *, raw: RawKeyEvent, now: Optional[float] = None) -> bool:
        """Complete the most recent open event for the released key.

        Args:
            raw: The raw key-up event
            now: Release time in milliseconds; defaults to the event timestamp

        Returns:
            True if an open event was completed, False if the release was ignored.
        """
        release_time = raw.timestamp if now is None else now
        event = self._find_open(raw.key, raw.code)
        if event is None:
            logger.debug("Ignoring key-up with no open press for %r (%s)", raw.key, raw.code)
            return False

        # A release stamped before its press (clock skew) collapses to a zero hold.
        release_time = max(release_time, event.press_time)
        event.release_time = release_time
        event.hold_time = release_time - event.press_time
        self.last_release_time = release_time
        return True

    def dispatch(self, raw: RawKeyEvent, now: Optional[float] = None) -> bool:
        """Route a raw event by type, dropping events captured in a stale generation.

        Events without a generation tag always apply.
        """
        if raw.generation is not None and raw.generation != self.generation:
            logger.debug(
                "Dropping %s event for %r from generation %d (current %d)",
                raw.event_type.value,
                raw.key,
                raw.generation,
                self.generation,
            )
            return False
        if raw.event_type == KeyEventType.DOWN:
            return self.record_key_down(raw=raw, now=now)
        return self.record_key_up(raw=raw, now=now)

    def reset(self) -> None:
        """Clear all events and cursors and start a new generation."""
        self.events.clear()
        self.last_press_time = None
        self.last_release_time = None
        self._typing_started = False
        self.generation += 1

    def snapshot(self) -> List[KeyEvent]:
        """Return deep copies of the recorded events."""
        return [event.model_copy(deep=True) for event in self.events]

    def get_count(self) -> int:
        """Get the number of recorded key events."""
        return len(self.events)

    def get_open_count(self) -> int:
        """Get the number of presses still waiting for a release."""
        return sum(1 for event in self.events if event.is_open)


def replay(raw_events: Iterable[RawKeyEvent]) -> List[KeyEvent]:
    """Feed a sequence of raw events into a fresh recorder and return its events."""
    recorder = KeystrokeRecorder()
    for raw in raw_events:
        recorder.dispatch(raw)
    return recorder.snapshot()
