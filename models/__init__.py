"""
Models package for the keystroke analysis pipeline.

This package contains the data models and the pure algorithms that own them:
key events and their recorder, whitespace normalization, sequence alignment,
confusion extraction and session metrics.
"""

from models.alignment import AlignmentResult, align
from models.key_event import FrozenKeyEvent, KeyEvent
from models.keystroke_payload import KeystrokeSavePayload
from models.keystroke_recorder import KeystrokeRecorder
from models.session_metrics import SessionMetrics

__all__ = [
    "AlignmentResult",
    "FrozenKeyEvent",
    "KeyEvent",
    "KeystrokeRecorder",
    "KeystrokeSavePayload",
    "SessionMetrics",
    "align",
]
