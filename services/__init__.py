"""Service layer: session assembly, the typing-session state machine and the
persistence boundary.
"""

from __future__ import annotations

from typing import Optional

from helpers.debug_util import DebugUtil
from models.analysis_config import AnalysisConfig
from services.typing_session import TypingSession


def init_session(
    config: Optional[AnalysisConfig] = None, debug_util: Optional[DebugUtil] = None
) -> TypingSession:
    """Create a TypingSession wired with config and debug output.

    Example:
        session = init_session(AnalysisConfig.from_env())
    """
    return TypingSession(config or AnalysisConfig.from_env(), debug_util=debug_util or DebugUtil())
