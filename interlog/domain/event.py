from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

CORRELATION_METADATA_KEY = "correlationIdentifier"
CAUSATION_METADATA_KEY = "causationIdentifier"


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information
    """
    return datetime.now(tz=timezone.utc)


def new_identifier() -> str:
    """Generate a fresh, lexicographically sortable event identifier."""
    return str(ULID())


class WritableEvent(BaseModel):
    """An event handed to the storage for appending to a stream.

    WritableEvent carries everything the caller decides about an event. The
    storage assigns the rest (sequence number, stream version and the
    recording timestamp) when the event is committed.

    Attributes:
        identifier: Globally unique identifier, also used as the storage key.
            Committing an identifier twice fails.
        type: Event type tag (e.g., "OrderPlaced").
        payload: Event data.
        metadata: Free-form metadata (actor, tracing headers, ...).
        correlation_id: Correlation ID for tracing the whole logical
            operation. Falls back to ``metadata["correlationIdentifier"]``.
        causation_id: ID of what directly caused this event. Falls back to
            ``metadata["causationIdentifier"]``.

    Examples:
        >>> event = WritableEvent(
        ...     type="OrderPlaced",
        ...     payload={"order_id": "order-1", "total": 42},
        ...     metadata={"correlationIdentifier": "c-1"},
        ... )
        >>> event.effective_correlation_id
        'c-1'
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(
        default_factory=new_identifier,
        min_length=1,
        description="Globally unique identifier of this event",
    )
    type: str = Field(min_length=1, description="Event type tag")
    payload: dict[str, Any] = Field(default_factory=dict, description="Event data")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Event metadata")
    correlation_id: str | None = Field(
        default=None,
        description="Correlation ID for tracing the entire logical operation",
    )
    causation_id: str | None = Field(
        default=None,
        description="ID of what directly caused this event",
    )

    @property
    def effective_correlation_id(self) -> str | None:
        if self.correlation_id is not None:
            return self.correlation_id
        value = self.metadata.get(CORRELATION_METADATA_KEY)
        return None if value is None else str(value)

    @property
    def effective_causation_id(self) -> str | None:
        if self.causation_id is not None:
            return self.causation_id
        value = self.metadata.get(CAUSATION_METADATA_KEY)
        return None if value is None else str(value)


class RecordedEvent(BaseModel):
    """Immutable record of an event as it was committed to the log.

    Attributes:
        sequence_number: Position in the whole log (1-based, strictly increasing)
        stream_name: Name of the concrete stream the event belongs to
        version: Position in its stream (0-based, gap-free)
        type: Event type tag
        payload: Decoded event data
        metadata: Decoded event metadata
        identifier: Globally unique event identifier
        recorded_at: When the storage backend recorded the event (UTC)
        correlation_id: Optional correlation ID
        causation_id: Optional causation ID
    """

    model_config = ConfigDict(frozen=True)

    sequence_number: int
    stream_name: str
    version: int
    type: str
    payload: dict[str, Any]
    metadata: dict[str, Any]
    identifier: str
    recorded_at: datetime
    correlation_id: str | None = None
    causation_id: str | None = None
