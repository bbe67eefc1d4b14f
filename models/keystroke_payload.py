"""Value objects handed to the persistence collaborator at submission time."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_serializer, field_validator

from models.alignment import AlignmentResult
from models.confusion import top_confusions
from models.key_event import FrozenKeyEvent, KeyEvent
from models.session_metrics import SessionMetrics

SCHEMA_VERSION = 1


def generate_session_id(when: Optional[datetime] = None) -> str:
    """Build a sortable session identifier: ISO timestamp plus a random suffix.

    Colons and dots of the timestamp are replaced by dashes so the id is safe
    as a file or document name.
    """
    stamp = (when or datetime.now(timezone.utc)).isoformat(timespec="milliseconds")
    safe = stamp.replace(":", "-").replace(".", "-").replace("+00-00", "Z")
    return f"{safe}-{secrets.token_hex(3)}"


class TextMeta(BaseModel):
    """Context describing where the target passage came from."""

    category: Optional[str] = None
    label: Optional[str] = None
    index: Optional[int] = Field(default=None, ge=0)
    preset_id: Optional[str] = None

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


class SessionAnalysis(BaseModel):
    """The four alignments of a submission plus the confusion map."""

    char_alignment: AlignmentResult
    word_alignment: AlignmentResult
    normalized_char_alignment: AlignmentResult
    normalized_word_alignment: AlignmentResult
    confusion: Mapping[str, int] = Field(default_factory=dict, validate_default=True)
    normalized_typed_text: str = ""
    normalized_target_text: str = ""

    model_config = {
        "frozen": True,
    }

    @field_validator("confusion")
    @classmethod
    def validate_confusion_counts(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        """Ensure every confusion count is positive and store the map read-only."""
        for pair, count in v.items():
            if count <= 0:
                raise ValueError(f"confusion count for {pair!r} must be positive")
        return MappingProxyType(dict(v))

    @field_serializer("confusion")
    def serialize_confusion(self, v: Mapping[str, int]) -> Dict[str, int]:
        return dict(v)


class KeystrokeSavePayload(BaseModel):
    """Immutable result of one analysed typing session.

    Nested records are frozen too: key events are FrozenKeyEvent copies,
    sequences are tuples and maps are read-only views.
    """

    session_id: str = Field(default_factory=generate_session_id)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    typed_text: str
    target_text: str
    key_events: Tuple[FrozenKeyEvent, ...] = ()
    analysis: SessionAnalysis
    metrics: SessionMetrics
    text_meta: Optional[TextMeta] = None
    schema_version: int = SCHEMA_VERSION

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("key_events", mode="before")
    @classmethod
    def freeze_key_events(cls, v: Any) -> Any:
        """Convert recorder events into read-only copies."""
        if isinstance(v, (list, tuple)):
            return tuple(e.freeze() if isinstance(e, KeyEvent) else e for e in v)
        return v

    @property
    def confusion(self) -> Mapping[str, int]:
        """Shortcut to the confusion map."""
        return self.analysis.confusion

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the payload to a JSON-ready dict."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "KeystrokeSavePayload":
        """Rebuild a payload from its dict form."""
        try:
            return cls.model_validate(d)
        except ValueError as e:
            raise ValueError(f"Invalid keystroke payload: {str(e)}") from e

    def get_summary(self) -> str:
        """Return a one-line human-readable summary of the session."""
        m = self.metrics
        pairs = ", ".join(f"{pair} x{count}" for pair, count in top_confusions(self.confusion, 3))
        return (
            f"Session {self.session_id}: {m.total_keys} keys in {m.duration_ms / 1000.0:.1f}s, "
            f"{m.net_wpm5:.1f} net WPM, {m.char_accuracy:.1%} char accuracy"
            + (f" (top confusions: {pairs})" if pairs else "")
        )
