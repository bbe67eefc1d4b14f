"""Pytest configuration and shared fixtures for the test suite."""

import sys
from pathlib import Path
from typing import Iterable, List, Tuple

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from models.key_event import KeyEventType, RawKeyEvent  # noqa: E402

KeyPress = Tuple[str, float, float]


class KeyStream:
    """Builds synthetic raw keyboard events the way a browser would emit them."""

    @staticmethod
    def code_for(key: str) -> str:
        """Physical code for a logical key, in the DOM KeyboardEvent.code style."""
        if len(key) == 1 and key.isalpha():
            return f"Key{key.upper()}"
        if key == " ":
            return "Space"
        return key

    def down(self, key: str, t: float, code: str = "", **flags: object) -> RawKeyEvent:
        return RawKeyEvent(
            event_type=KeyEventType.DOWN,
            key=key,
            code=code or self.code_for(key),
            timestamp=t,
            **flags,
        )

    def up(self, key: str, t: float, code: str = "", **flags: object) -> RawKeyEvent:
        return RawKeyEvent(
            event_type=KeyEventType.UP,
            key=key,
            code=code or self.code_for(key),
            timestamp=t,
            **flags,
        )

    def presses(self, presses: Iterable[KeyPress]) -> List[RawKeyEvent]:
        """Interleave down/up events from (key, press, release) tuples in time order."""
        stream: List[RawKeyEvent] = []
        for key, press, release in presses:
            stream.append(self.down(key, press))
            stream.append(self.up(key, release))
        return sorted(stream, key=lambda e: e.timestamp)

    def typed(self, text: str, start: float = 0.0, step: float = 200.0, hold: float = 80.0):
        """One non-overlapping press per character of ``text``."""
        return self.presses(
            (ch, start + i * step, start + i * step + hold) for i, ch in enumerate(text)
        )


@pytest.fixture
def keys() -> KeyStream:
    """Factory for synthetic raw key events."""
    return KeyStream()
