"""Typing session state machine: Recording until submission, then Finalized."""

import logging
from enum import Enum
from typing import Optional

from helpers.debug_util import DebugUtil
from models.analysis_config import AnalysisConfig
from models.exceptions import SessionStateError
from models.key_event import RawKeyEvent
from models.keystroke_payload import KeystrokeSavePayload, TextMeta
from models.keystroke_recorder import KeystrokeRecorder
from services.persistence import KeystrokePersister, PersistAck, persist_payload
from services.session_analyzer import SessionAnalyzer

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle state of a typing session."""

    RECORDING = "recording"
    FINALIZED = "finalized"


class TypingSession:
    """Owns one keystroke recorder and produces exactly one payload per generation.

    Key events are accepted while RECORDING. ``submit`` runs the analysis
    synchronously and moves the session to FINALIZED; only ``reset`` starts a
    new recording.

    The stale-event guard only sees events that carry a generation. The event
    source should pass each event through ``stamp`` when it is captured, so a
    release that is delivered after ``reset`` is recognised and dropped.
    Untagged events always apply to the current recording.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        debug_util: Optional[DebugUtil] = None,
    ) -> None:
        self.recorder = KeystrokeRecorder()
        self.analyzer = SessionAnalyzer(config, debug_util=debug_util)
        self.state = SessionState.RECORDING
        self.payload: Optional[KeystrokeSavePayload] = None

    @property
    def generation(self) -> int:
        """Current session generation; events tagged with another generation are dropped."""
        return self.recorder.generation

    @property
    def has_typing_started(self) -> bool:
        """True once a character key has been pressed in this generation."""
        return self.recorder.has_typing_started

    def stamp(self, raw: RawKeyEvent) -> RawKeyEvent:
        """Return ``raw`` tagged with the current generation unless already tagged."""
        if raw.generation is not None:
            return raw
        return raw.model_copy(update={"generation": self.generation})

    def handle_event(self, raw: RawKeyEvent, now: Optional[float] = None) -> bool:
        """Feed one raw keyboard event; returns True if it changed the recording."""
        if self.state != SessionState.RECORDING:
            logger.debug(
                "Dropping %s event for %r: session finalized", raw.event_type.value, raw.key
            )
            return False
        return self.recorder.dispatch(raw, now)

    def submit(
        self,
        typed_text: str,
        target_text: str,
        text_meta: Optional[TextMeta] = None,
        now: Optional[float] = None,
    ) -> KeystrokeSavePayload:
        """Analyse the recording and finalize the session.

        Raises:
            SessionStateError: If the session was already submitted.
        """
        if self.state == SessionState.FINALIZED:
            raise SessionStateError(
                "Session already finalized; call reset() before submitting again"
            )
        self.payload = self.analyzer.build_payload(
            events=self.recorder.snapshot(),
            typed_text=typed_text,
            target_text=target_text,
            text_meta=text_meta,
            now=now,
        )
        self.state = SessionState.FINALIZED
        logger.info(
            "Finalized session %s (generation %d, %d key events)",
            self.payload.session_id,
            self.generation,
            len(self.payload.key_events),
        )
        return self.payload

    def submit_and_persist(
        self,
        persister: KeystrokePersister,
        typed_text: str,
        target_text: str,
        text_meta: Optional[TextMeta] = None,
        now: Optional[float] = None,
    ) -> PersistAck:
        """Submit the session and hand the payload to the persistence collaborator."""
        payload = self.submit(typed_text, target_text, text_meta=text_meta, now=now)
        return persist_payload(persister, payload)

    def reset(self) -> None:
        """Discard the recording and any payload, and start a new generation."""
        self.recorder.reset()
        self.payload = None
        self.state = SessionState.RECORDING
        logger.debug("Session reset to generation %d", self.generation)
