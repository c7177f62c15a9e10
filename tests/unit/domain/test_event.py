"""Tests for the event models."""

import pytest
from pydantic import ValidationError
from ulid import ULID

from interlog.domain import WritableEvent


def test_identifier_defaults_to_ulid():
    event = WritableEvent(type="OrderPlaced")

    assert ULID.from_str(event.identifier)
    assert event.identifier != WritableEvent(type="OrderPlaced").identifier


def test_payload_and_metadata_default_to_empty():
    event = WritableEvent(type="OrderPlaced")

    assert event.payload == {}
    assert event.metadata == {}


def test_type_is_required():
    with pytest.raises(ValidationError):
        WritableEvent(type="")


def test_explicit_tracing_ids_win_over_metadata():
    event = WritableEvent(
        type="OrderPlaced",
        metadata={"correlationIdentifier": "from-meta", "causationIdentifier": "cause-meta"},
        correlation_id="explicit",
        causation_id="cause",
    )

    assert event.effective_correlation_id == "explicit"
    assert event.effective_causation_id == "cause"


def test_tracing_ids_fall_back_to_metadata():
    event = WritableEvent(
        type="OrderPlaced",
        metadata={"correlationIdentifier": "c-1", "causationIdentifier": "k-1"},
    )

    assert event.effective_correlation_id == "c-1"
    assert event.effective_causation_id == "k-1"


def test_tracing_ids_absent():
    event = WritableEvent(type="OrderPlaced")

    assert event.effective_correlation_id is None
    assert event.effective_causation_id is None
