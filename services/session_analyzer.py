"""Session assembler: turns recorded key events and texts into a save payload.

Pipeline, run once per submission:

1. Normalize whitespace of the typed and target texts.
2. Align expected against typed text four times: raw chars, raw words,
   normalized chars, normalized words.
3. Extract confusion pairs from the raw character alignment.
4. Compute session metrics from the events and alignments.
5. Assemble everything into a frozen KeystrokeSavePayload.
"""

import logging
from typing import Optional, Sequence

from helpers.debug_util import DebugUtil
from models.alignment import align
from models.analysis_config import AnalysisConfig
from models.confusion import extract_confusions
from models.key_event import KeyEvent
from models.keystroke_payload import KeystrokeSavePayload, SessionAnalysis, TextMeta
from models.session_metrics import MetricsCalculator
from models.text_normalizer import normalize_whitespace, split_chars, split_words

logger = logging.getLogger(__name__)


class SessionAnalyzer:
    """Stateless assembler for KeystrokeSavePayload values."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        debug_util: Optional[DebugUtil] = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            config: Analysis tunables; defaults to AnalysisConfig().
            debug_util: Optional debug output helper.
        """
        self.config = config or AnalysisConfig()
        self.debug_util = debug_util
        self.metrics_calculator = MetricsCalculator(self.config)

    def _debug(self, message: str) -> None:
        if self.debug_util is not None:
            self.debug_util.debugMessage(message)
        else:
            logger.debug(message)

    def analyze_texts(self, typed_text: str, target_text: str) -> SessionAnalysis:
        """Align the target text against the typed text at all four granularities."""
        sep = self.config.word_separator
        normalized_typed = normalize_whitespace(typed_text)
        normalized_target = normalize_whitespace(target_text)

        char_alignment = align(split_chars(target_text), split_chars(typed_text))
        return SessionAnalysis(
            char_alignment=char_alignment,
            word_alignment=align(split_words(target_text, sep), split_words(typed_text, sep)),
            normalized_char_alignment=align(
                split_chars(normalized_target), split_chars(normalized_typed)
            ),
            normalized_word_alignment=align(
                split_words(normalized_target), split_words(normalized_typed)
            ),
            confusion=extract_confusions(char_alignment),
            normalized_typed_text=normalized_typed,
            normalized_target_text=normalized_target,
        )

    def build_payload(
        self,
        *,
        events: Sequence[KeyEvent],
        typed_text: str,
        target_text: str,
        text_meta: Optional[TextMeta] = None,
        now: Optional[float] = None,
    ) -> KeystrokeSavePayload:
        """Run the full analysis and assemble the immutable payload.

        Args:
            events: Recorded key events; stored as read-only copies
            typed_text: Text the user submitted
            target_text: Passage the user was asked to type
            text_meta: Optional passage context
            now: Fallback timestamp (ms) used when no events were recorded

        Returns:
            KeystrokeSavePayload for the external persistence collaborator.
        """
        analysis = self.analyze_texts(typed_text, target_text)
        metrics = self.metrics_calculator.calculate(
            events=events,
            typed_text=typed_text,
            target_text=target_text,
            char_alignment=analysis.char_alignment,
            word_alignment=analysis.word_alignment,
            normalized_char_alignment=analysis.normalized_char_alignment,
            normalized_word_alignment=analysis.normalized_word_alignment,
            now=now,
        )
        payload = KeystrokeSavePayload(
            typed_text=typed_text,
            target_text=target_text,
            key_events=tuple(event.freeze() for event in events),
            analysis=analysis,
            metrics=metrics,
            text_meta=text_meta,
        )
        self._debug(payload.get_summary())
        return payload


def analyze_session(
    events: Sequence[KeyEvent],
    typed_text: str,
    target_text: str,
    *,
    text_meta: Optional[TextMeta] = None,
    now: Optional[float] = None,
    config: Optional[AnalysisConfig] = None,
) -> KeystrokeSavePayload:
    """Convenience wrapper: analyse one session with a throwaway SessionAnalyzer."""
    return SessionAnalyzer(config).build_payload(
        events=events,
        typed_text=typed_text,
        target_text=target_text,
        text_meta=text_meta,
        now=now,
    )
