"""Event storage on top of a document database.

Layout below the base document ``<base collection>/<base document>``:

- ``events``: one document per event, keyed by the event identifier
- ``streams``: one ``{"version": int}`` counter per concrete stream, plus the
  reserved ``all`` counter for the whole log
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import cached_property

from ..config import EventStorageConfiguration
from ..domain.event import WritableEvent
from ..domain.exceptions import (
    BackendUnavailableError,
    ConcurrencyConflictError,
    DuplicateEventError,
    InvalidStreamSelectorError,
)
from ..domain.streams import ConcreteStream, StreamName, StreamSelector
from .base import EventStorage, ExpectedVersion
from .codec import EventCodec
from .cursor import BATCH_SIZE, EventStreamCursor
from .documents import (
    DocumentBackend,
    DocumentExistsError,
    DocumentTransaction,
    IndexDirection,
    IndexSpec,
)
from .selectors import SEQUENCE_NUMBER_FIELD, STREAM_FIELD, build_stream_query
from .status import StorageStatus
from .versions import ALL_STREAM_COUNTER, VersionStore

LOGGER = logging.getLogger(__name__)

EVENT_INDEXES = [
    IndexSpec(keys=[(SEQUENCE_NUMBER_FIELD, IndexDirection.ASC)], unique=True),
    IndexSpec(
        keys=[
            (STREAM_FIELD, IndexDirection.ASC),
            (SEQUENCE_NUMBER_FIELD, IndexDirection.ASC),
        ]
    ),
]


@dataclass(frozen=True)
class BaseLocation:
    """Collection paths below the base document."""

    events: str
    streams: str


class DocumentEventStorage(EventStorage):
    """EventStorage implementation backed by a document database.

    Commits run in a single backend transaction which:

    1. reads the stream's version counter and checks the expected version
    2. reads the ``all`` counter
    3. creates one document per event, numbering them consecutively
    4. advances both counters by the number of events written

    Because every commit writes the ``all`` counter, concurrent commits are
    serialized by the backend's conflict detection on that document and
    sequence numbers follow commit order.

    Attributes:
        backend: The document database.
        config: Storage layout configuration.

    Examples:
        >>> storage = DocumentEventStorage(InMemoryDocumentBackend())
        >>> storage.commit(
        ...     "order-1",
        ...     [WritableEvent(type="OrderPlaced", payload={"total": 42})],
        ...     expected_version=ExpectedVersion.NO_STREAM,
        ... )
        >>> [e.version for e in storage.load("order-1")]
        [0]
    """

    def __init__(
        self,
        backend: DocumentBackend,
        config: EventStorageConfiguration | None = None,
        codec: EventCodec | None = None,
        batch_size: int = BATCH_SIZE,
    ) -> None:
        self.backend = backend
        self.config = config or EventStorageConfiguration()
        self._codec = codec or EventCodec()
        self._batch_size = batch_size

    @cached_property
    def _base_location(self) -> BaseLocation:
        """Collection paths, computed once per storage instance."""
        base = (self.config.base_collection_name, self.config.base_document_id)
        return BaseLocation(
            events=self.backend.collection_path(*base, self.config.events_collection_name),
            streams=self.backend.collection_path(*base, self.config.streams_collection_name),
        )

    @cached_property
    def _versions(self) -> VersionStore:
        return VersionStore(self._base_location.streams)

    # ========== Reading ==========

    def load(
        self,
        stream: "str | StreamSelector",
        minimum_sequence_number: int = 0,
    ) -> EventStreamCursor:
        query = build_stream_query(
            self._base_location.events, stream, minimum_sequence_number
        )
        return EventStreamCursor(self.backend, query, self._codec, self._batch_size)

    # ========== Writing ==========

    def commit(
        self,
        stream: "str | StreamSelector",
        events: Sequence[WritableEvent],
        expected_version: int = ExpectedVersion.ANY,
    ) -> None:
        stream_name = self._writable_stream_name(stream)
        if not events:
            return

        extra = {
            "stream": stream_name,
            "event_count": len(events),
            "expected_version": int(expected_version),
        }
        LOGGER.debug("Committing events", extra=extra)

        try:
            self.backend.run_transaction(
                lambda transaction: self._commit_in_transaction(
                    transaction, stream_name, events, expected_version
                )
            )
        except ConcurrencyConflictError as e:
            LOGGER.info(
                "Concurrency conflict",
                extra={**extra, "actual_version": e.actual_version},
            )
            raise
        except DuplicateEventError as e:
            LOGGER.info("Duplicate event", extra={**extra, "identifier": e.identifier})
            raise

        LOGGER.debug("Committed events", extra=extra)

    def _commit_in_transaction(
        self,
        transaction: DocumentTransaction,
        stream_name: str,
        events: Sequence[WritableEvent],
        expected_version: int,
    ) -> None:
        stream_version = self._versions.read(transaction, stream_name)
        if expected_version != ExpectedVersion.ANY and expected_version != stream_version:
            raise ConcurrencyConflictError(stream_name, int(expected_version), stream_version)

        all_version = self._versions.read(transaction, ALL_STREAM_COUNTER)

        version = stream_version
        position = all_version
        for event in events:
            version += 1
            position += 1
            document = self._codec.encode(
                event,
                stream_name=stream_name,
                sequence_number=position + 1,
                version=version,
            )
            try:
                transaction.create(self._base_location.events, event.identifier, document)
            except DocumentExistsError as e:
                raise DuplicateEventError(event.identifier) from e

        self._versions.advance(transaction, stream_name, stream_version, len(events))
        self._versions.advance(transaction, ALL_STREAM_COUNTER, all_version, len(events))

    @staticmethod
    def _writable_stream_name(stream: "str | StreamSelector") -> str:
        selector = StreamName.parse(stream)
        if not isinstance(selector, ConcreteStream):
            raise InvalidStreamSelectorError(
                f'Cannot commit to virtual stream "{selector}"'
            )
        if selector.name == ALL_STREAM_COUNTER:
            raise InvalidStreamSelectorError(
                f'Stream name "{ALL_STREAM_COUNTER}" is reserved'
            )
        return selector.name

    # ========== Setup & status ==========

    def status(self) -> StorageStatus:
        result = StorageStatus()
        try:
            self.backend.ping()
        except BackendUnavailableError as e:
            LOGGER.warning("Event storage backend unavailable", exc_info=True)
            result.add_error(str(e), title="Backend")
            return result

        self._describe(result)
        return result

    def setup(self) -> StorageStatus:
        result = StorageStatus()
        try:
            self.backend.ping()
            self.backend.ensure_indexes(self._base_location.events, EVENT_INDEXES)
        except BackendUnavailableError as e:
            LOGGER.warning("Event storage setup failed", exc_info=True)
            result.add_error(str(e), title="Backend")
            return result

        self._describe(result)
        result.add_notice(str(len(EVENT_INDEXES)), title="Event Indexes")
        return result

    def _describe(self, result: StorageStatus) -> None:
        result.add_notice(self.config.base_collection_name, title="Base Collection")
        result.add_notice(self.config.base_document_id, title="Base Document Id")
        result.add_notice(self._base_location.events, title="Events Collection")
        result.add_notice(self._base_location.streams, title="Streams Collection")
