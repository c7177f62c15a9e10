"""Interlog - Event log storage on document databases.

This module provides the public API for persisting and replaying
event-sourced streams.
"""

from .config import EventStorageConfiguration
from .domain import (
    AllStream,
    BackendUnavailableError,
    CategoryStream,
    ConcreteStream,
    ConcurrencyConflictError,
    DuplicateEventError,
    EventStoreError,
    InvalidStreamSelectorError,
    RecordedEvent,
    StreamName,
    WritableEvent,
)
from .storage import (
    DocumentEventStorage,
    EventStorage,
    EventStreamCursor,
    ExpectedVersion,
    InMemoryDocumentBackend,
    StorageStatus,
)

__all__ = [
    # Storage
    "EventStorage",
    "DocumentEventStorage",
    "EventStreamCursor",
    "ExpectedVersion",
    "InMemoryDocumentBackend",
    "StorageStatus",
    "EventStorageConfiguration",
    # Domain primitives
    "RecordedEvent",
    "WritableEvent",
    "StreamName",
    "ConcreteStream",
    "CategoryStream",
    "AllStream",
    # Errors
    "EventStoreError",
    "InvalidStreamSelectorError",
    "ConcurrencyConflictError",
    "DuplicateEventError",
    "BackendUnavailableError",
]
