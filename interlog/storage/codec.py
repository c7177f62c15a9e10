"""Conversion between event records and their stored document form."""

from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter

from ..domain.event import RecordedEvent, WritableEvent
from .documents import SERVER_TIMESTAMP, Document

_JSON_OBJECT = TypeAdapter(dict[str, Any])


class EventCodec:
    """Encodes writable events into documents and decodes stored documents.

    Document structure:
        {
            "sequenceNumber": 12,
            "stream": "order-1",
            "version": 3,
            "type": "OrderPlaced",
            "payload": "{\\"total\\":42}",
            "metadata": "{}",
            "correlationId": "01J...",
            "causationId": null,
            "recordedAt": <server timestamp>
        }

    The event identifier is the document key and is not part of the fields.
    """

    def encode(
        self,
        event: WritableEvent,
        stream_name: str,
        sequence_number: int,
        version: int,
    ) -> dict[str, Any]:
        return {
            "sequenceNumber": sequence_number,
            "stream": stream_name,
            "version": version,
            "type": event.type,
            "payload": _JSON_OBJECT.dump_json(event.payload).decode(),
            "metadata": _JSON_OBJECT.dump_json(event.metadata).decode(),
            "correlationId": event.effective_correlation_id,
            "causationId": event.effective_causation_id,
            "recordedAt": SERVER_TIMESTAMP,
        }

    def decode(self, document: Document) -> RecordedEvent:
        data = document.data
        return RecordedEvent(
            sequence_number=int(data["sequenceNumber"]),
            stream_name=str(data["stream"]),
            version=int(data["version"]),
            type=str(data["type"]),
            payload=self._decode_json(data.get("payload")),
            metadata=self._decode_json(data.get("metadata")),
            identifier=document.id,
            recorded_at=self._decode_timestamp(data["recordedAt"]),
            correlation_id=data.get("correlationId"),
            causation_id=data.get("causationId"),
        )

    @staticmethod
    def _decode_json(value: str | None) -> dict[str, Any]:
        if not value:
            return {}
        return _JSON_OBJECT.validate_json(value)

    @staticmethod
    def _decode_timestamp(value: datetime) -> datetime:
        # Drivers hand back naive datetimes in UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
