"""Tests for the event codec."""

import json
from datetime import datetime, timedelta, timezone

from interlog.domain import WritableEvent
from interlog.storage import SERVER_TIMESTAMP, Document, EventCodec


def test_encode_produces_stored_field_set():
    event = WritableEvent(
        identifier="e-1",
        type="OrderPlaced",
        payload={"total": 42, "items": ["a", "b"]},
        metadata={"correlationIdentifier": "c-1"},
    )

    document = EventCodec().encode(event, stream_name="order-1", sequence_number=7, version=2)

    assert set(document) == {
        "sequenceNumber",
        "stream",
        "version",
        "type",
        "payload",
        "metadata",
        "correlationId",
        "causationId",
        "recordedAt",
    }
    assert document["sequenceNumber"] == 7
    assert document["stream"] == "order-1"
    assert document["version"] == 2
    assert document["type"] == "OrderPlaced"
    assert json.loads(document["payload"]) == {"total": 42, "items": ["a", "b"]}
    assert json.loads(document["metadata"]) == {"correlationIdentifier": "c-1"}
    assert document["correlationId"] == "c-1"
    assert document["causationId"] is None
    assert document["recordedAt"] is SERVER_TIMESTAMP


def test_decode_types_fields():
    recorded_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
    document = Document(
        id="e-1",
        data={
            "sequenceNumber": 7,
            "stream": "order-1",
            "version": 2,
            "type": "OrderPlaced",
            "payload": '{"total": 42}',
            "metadata": "{}",
            "correlationId": "c-1",
            "causationId": None,
            "recordedAt": recorded_at,
        },
    )

    event = EventCodec().decode(document)

    assert event.identifier == "e-1"
    assert event.sequence_number == 7
    assert event.stream_name == "order-1"
    assert event.version == 2
    assert event.type == "OrderPlaced"
    assert event.payload == {"total": 42}
    assert event.metadata == {}
    assert event.correlation_id == "c-1"
    assert event.causation_id is None
    assert event.recorded_at == recorded_at


def test_decode_treats_naive_timestamps_as_utc():
    document = Document(
        id="e-1",
        data={
            "sequenceNumber": 1,
            "stream": "s",
            "version": 0,
            "type": "T",
            "payload": "{}",
            "metadata": "{}",
            "recordedAt": datetime(2025, 1, 1, 12, 0, 0),
        },
    )

    recorded_at = EventCodec().decode(document).recorded_at

    assert recorded_at.tzinfo is not None
    assert recorded_at == datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_decode_normalizes_offsets_to_utc():
    plus_two = timezone(timedelta(hours=2))
    document = Document(
        id="e-1",
        data={
            "sequenceNumber": 1,
            "stream": "s",
            "version": 0,
            "type": "T",
            "payload": "{}",
            "metadata": "{}",
            "recordedAt": datetime(2025, 1, 1, 14, 0, 0, tzinfo=plus_two),
        },
    )

    recorded_at = EventCodec().decode(document).recorded_at

    assert recorded_at.utcoffset() == timedelta(0)
    assert recorded_at.hour == 12


def test_decode_tolerates_missing_metadata():
    document = Document(
        id="e-1",
        data={
            "sequenceNumber": 1,
            "stream": "s",
            "version": 0,
            "type": "T",
            "payload": "{}",
            "recordedAt": datetime(2025, 1, 1, tzinfo=timezone.utc),
        },
    )

    assert EventCodec().decode(document).metadata == {}
