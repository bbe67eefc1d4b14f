"""Key event models for tracking physical key interactions during a typing exercise."""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class KeyEventType(str, Enum):
    """Direction of a raw keyboard event."""

    DOWN = "down"
    UP = "up"


def is_character_key(key: str) -> bool:
    """Return True if the logical key is a single printable character.

    Named keys such as "Backspace", "Enter" or "ArrowLeft" are not character
    keys; neither are control characters.
    """
    return len(key) == 1 and key.isprintable()


class RawKeyEvent(BaseModel):
    """Pydantic model for one raw keyboard event as delivered by the UI event source."""

    event_type: KeyEventType
    key: str = Field(min_length=1)
    code: str = ""
    timestamp: float = Field(ge=0, description="Event time in milliseconds")
    alt: bool = False
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    repeat: bool = False
    generation: Optional[int] = Field(
        default=None, ge=0, description="Session generation the event was captured in"
    )

    model_config = {
        "frozen": True,
    }


class KeyEvent(BaseModel):
    """Pydantic model for one recorded key press, completed when its release arrives."""

    key: str
    code: str = ""
    press_time: float = Field(ge=0)
    release_time: Optional[float] = None
    hold_time: Optional[float] = None
    lag_time: float = Field(default=0.0, description="Gap since the previous key release")
    total_lag_time: float = Field(default=0.0, description="Gap since the previous key press")
    alt: bool = False
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    model_config = {
        "validate_assignment": True,
    }

    @field_validator("release_time", "hold_time")
    @classmethod
    def validate_non_negative(cls, v: Optional[float]) -> Optional[float]:
        """Ensure optional timing values are non-negative when present."""
        if v is not None and v < 0:
            raise ValueError("timing values must be non-negative")
        return v

    @model_validator(mode="after")
    def check_release_after_press(self) -> "KeyEvent":
        """Validate that a completed event was released no earlier than it was pressed."""
        if self.release_time is not None and self.release_time < self.press_time:
            raise ValueError("release_time must be >= press_time")
        return self

    @property
    def is_open(self) -> bool:
        """True while the key has not been released."""
        return self.release_time is None

    @property
    def is_character_key(self) -> bool:
        """True if this event is for a single printable character."""
        return is_character_key(self.key)

    def matches(self, key: str, code: str) -> bool:
        """Return True if this event belongs to the given logical and physical key."""
        return self.key == key and self.code == code

    @classmethod
    def from_dict(cls, *, data: Dict[str, Any]) -> "KeyEvent":
        """Create a KeyEvent from a dictionary, accepting camelCase keys as well."""
        aliases = {
            "pressTime": "press_time",
            "releaseTime": "release_time",
            "holdTime": "hold_time",
            "lagTime": "lag_time",
            "totalLagTime": "total_lag_time",
        }
        normalized = {aliases.get(k, k): v for k, v in data.items()}
        return cls.model_validate(normalized)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the key event to a JSON-ready dictionary."""
        return self.model_dump(mode="json")

    def freeze(self) -> "FrozenKeyEvent":
        """Return a read-only copy of this event."""
        return FrozenKeyEvent.model_validate(self.model_dump())


class FrozenKeyEvent(KeyEvent):
    """Read-only KeyEvent as stored in a finalized session payload."""

    model_config = {
        "frozen": True,
    }

    def freeze(self) -> "FrozenKeyEvent":
        """Already read-only; returns self."""
        return self
