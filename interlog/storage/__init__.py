"""Event storage on document databases.

This package provides the storage components:
- EventStorage: Interface for durable event persistence
- DocumentEventStorage: EventStorage on top of a DocumentBackend
- EventStreamCursor: Batched, lazily paginating reader
- DocumentBackend: Port to the underlying document database
- InMemoryDocumentBackend: Non-durable backend for tests
"""

from .base import EventStorage, ExpectedVersion
from .codec import EventCodec
from .cursor import BATCH_SIZE, EventStreamCursor
from .documents import (
    SERVER_TIMESTAMP,
    Document,
    DocumentBackend,
    DocumentExistsError,
    DocumentQuery,
    DocumentTransaction,
    FieldFilter,
    IndexDirection,
    IndexSpec,
)
from .event_storage import DocumentEventStorage
from .memory import InMemoryDocumentBackend
from .selectors import build_stream_query, resolve_stream_selector
from .status import StatusEntry, StorageStatus
from .versions import VersionStore

__all__ = [
    # Storage
    "EventStorage",
    "DocumentEventStorage",
    "ExpectedVersion",
    "EventStreamCursor",
    "BATCH_SIZE",
    "EventCodec",
    "VersionStore",
    "resolve_stream_selector",
    "build_stream_query",
    # Status reporting
    "StorageStatus",
    "StatusEntry",
    # Document backend port
    "DocumentBackend",
    "DocumentTransaction",
    "DocumentQuery",
    "Document",
    "DocumentExistsError",
    "FieldFilter",
    "IndexSpec",
    "IndexDirection",
    "SERVER_TIMESTAMP",
    # In-memory implementation
    "InMemoryDocumentBackend",
]
