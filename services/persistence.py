"""Persistence boundary for analysed sessions.

This project ships no storage backend. Callers provide an object that
implements KeystrokePersister; persist_payload wraps it with logging and a
uniform error type.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from models.exceptions import PersistError
from models.keystroke_payload import KeystrokeSavePayload

logger = logging.getLogger(__name__)


class PersistAck(BaseModel):
    """Acknowledgement returned by a persistence collaborator."""

    session_id: str
    location: Optional[str] = None

    model_config = {
        "frozen": True,
    }


@runtime_checkable
class KeystrokePersister(Protocol):
    """Anything that can store a KeystrokeSavePayload."""

    def persist(self, payload: KeystrokeSavePayload) -> PersistAck:
        """Store the payload and acknowledge it."""
        ...


def persist_payload(persister: KeystrokePersister, payload: KeystrokeSavePayload) -> PersistAck:
    """Hand a payload to the persistence collaborator.

    Raises:
        PersistError: If the collaborator fails; the original exception is chained.
    """
    try:
        ack = persister.persist(payload)
    except PersistError:
        logger.error("Persisting session %s failed", payload.session_id)
        raise
    except Exception as e:
        logger.error("Persisting session %s failed: %s", payload.session_id, e)
        raise PersistError(f"Failed to persist session {payload.session_id}: {e}") from e
    logger.info("Persisted session %s (%s)", ack.session_id, ack.location or "no location")
    return ack
