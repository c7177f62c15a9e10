from .event import RecordedEvent, WritableEvent, utc_now
from .exceptions import (
    BackendUnavailableError,
    ConcurrencyConflictError,
    DuplicateEventError,
    EventStoreError,
    InvalidStreamSelectorError,
)
from .streams import AllStream, CategoryStream, ConcreteStream, StreamName, StreamSelector

__all__ = [
    "AllStream",
    "BackendUnavailableError",
    "CategoryStream",
    "ConcreteStream",
    "ConcurrencyConflictError",
    "DuplicateEventError",
    "EventStoreError",
    "InvalidStreamSelectorError",
    "RecordedEvent",
    "StreamName",
    "StreamSelector",
    "WritableEvent",
    "utc_now",
]
