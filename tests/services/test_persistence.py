"""Tests for the persistence boundary."""

import logging

import pytest

from models.exceptions import PersistError
from services.persistence import KeystrokePersister, PersistAck, persist_payload
from services.session_analyzer import analyze_session


class GoodPersister:
    def persist(self, payload):
        return PersistAck(session_id=payload.session_id, location=f"sessions/{payload.session_id}")


class BrokenPersister:
    def persist(self, payload):
        raise ConnectionError("backend unavailable")


class RefusingPersister:
    def persist(self, payload):
        raise PersistError("quota exceeded")


@pytest.fixture
def payload():
    return analyze_session([], "a", "a", now=0.0)


def test_protocol_is_runtime_checkable() -> None:
    assert isinstance(GoodPersister(), KeystrokePersister)
    assert not isinstance(object(), KeystrokePersister)


def test_persist_returns_ack(payload, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="services.persistence"):
        ack = persist_payload(GoodPersister(), payload)
    assert ack.session_id == payload.session_id
    assert "Persisted session" in caplog.text


def test_unexpected_errors_are_wrapped(payload) -> None:
    with pytest.raises(PersistError) as excinfo:
        persist_payload(BrokenPersister(), payload)
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert payload.session_id in str(excinfo.value)


def test_persist_errors_pass_through(payload) -> None:
    with pytest.raises(PersistError, match="quota exceeded"):
        persist_payload(RefusingPersister(), payload)
