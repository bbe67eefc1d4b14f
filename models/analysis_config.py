"""Tunable parameters for the keystroke analysis pipeline."""

import logging
import os
from typing import Any, Dict

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "KEYSTROKE_ANALYSIS_"


class AnalysisConfig(BaseModel):
    """Configuration for speed, accuracy and timing calculations.

    Defaults reproduce the standard typing conventions: a "word" is five
    characters and timing spread is summarised at the 95th percentile.
    """

    chars_per_word: int = Field(default=5, gt=0)
    percentile: float = Field(default=95.0, gt=0.0, le=100.0)
    minutes_epsilon: float = Field(
        default=1e-9, gt=0.0, description="Lower bound for elapsed minutes in rate divisions"
    )
    backspace_key: str = "Backspace"
    word_separator: str = Field(default=" ", min_length=1)

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @classmethod
    def from_env(cls) -> "AnalysisConfig":
        """Build a config from KEYSTROKE_ANALYSIS_* environment variables.

        Unset variables keep their defaults; set but invalid values raise a
        pydantic ValidationError.
        """
        overrides: Dict[str, Any] = {}
        for field in ("chars_per_word", "percentile", "minutes_epsilon"):
            raw = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
            if raw is not None and raw.strip():
                overrides[field] = raw.strip()
        if overrides:
            logger.debug("Analysis config overrides from environment: %s", overrides)
        return cls.model_validate(overrides)
