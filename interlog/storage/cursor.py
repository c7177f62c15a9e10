"""Lazily paginating cursor over the ordered event collection."""

import logging
from collections.abc import Iterator

from ..domain.event import RecordedEvent
from .codec import EventCodec
from .documents import DocumentBackend, DocumentQuery

LOGGER = logging.getLogger(__name__)

BATCH_SIZE = 100


class EventStreamCursor(Iterator[RecordedEvent]):
    """Forward-only, restartable sequence of recorded events.

    The cursor fetches events in pages of ``batch_size`` documents. The
    first page is fetched on construction, every following page only when
    the previous one has been consumed. A page that comes back empty marks
    the cursor as exhausted.

    Pages are addressed by the number of documents already consumed, so the
    cursor stays correct for filtered queries whose sequence numbers are not
    contiguous.

    Iterating the cursor (``for event in cursor``) rewinds it first, so the
    same cursor can be replayed. ``next(cursor)`` continues from the current
    position.

    Attributes:
        query: The ordered query being paginated.
        batch_size: Number of documents fetched per page.

    Examples:
        >>> cursor = storage.load("$ce-order")
        >>> for event in cursor:
        ...     print(event.sequence_number, event.type)
        >>>
        >>> # Manual stepping
        >>> cursor.rewind()
        >>> while cursor.valid():
        ...     event = cursor.current()
        ...     cursor.advance()
    """

    def __init__(
        self,
        backend: DocumentBackend,
        query: DocumentQuery,
        codec: EventCodec | None = None,
        batch_size: int = BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._backend = backend
        self._codec = codec or EventCodec()
        self.query = query
        self.batch_size = batch_size
        self._offset = 0
        self._page: list[RecordedEvent] = []
        self._position = 0
        self._exhausted = False
        self._fetch_batch()

    def valid(self) -> bool:
        """Whether the cursor points at an event."""
        return self._position < len(self._page)

    def current(self) -> RecordedEvent:
        """Return the event the cursor points at.

        Raises:
            IndexError: If the cursor is exhausted.
        """
        if not self.valid():
            raise IndexError("cursor is exhausted")
        return self._page[self._position]

    def key(self) -> int | None:
        """Sequence number of the current event, or None when exhausted."""
        return self._page[self._position].sequence_number if self.valid() else None

    def advance(self) -> None:
        """Move to the next event, fetching the next page when needed."""
        if not self.valid():
            return
        self._position += 1
        if self._position < len(self._page):
            return
        self._offset += len(self._page)
        self._fetch_batch()

    def rewind(self) -> None:
        """Restart the cursor at the first event.

        A cursor that has not advanced yet is left untouched.
        """
        if self._offset == 0 and self._position == 0 and not self._exhausted:
            return
        self._offset = 0
        self._exhausted = False
        self._fetch_batch()

    def __iter__(self) -> "EventStreamCursor":
        self.rewind()
        return self

    def __next__(self) -> RecordedEvent:
        if not self.valid():
            raise StopIteration
        event = self.current()
        self.advance()
        return event

    def _fetch_batch(self) -> None:
        self._position = 0
        documents = self._backend.query(self.query.page(self._offset, self.batch_size))
        self._page = [self._codec.decode(document) for document in documents]
        if not self._page:
            self._exhausted = True
        LOGGER.debug(
            "Fetched event batch",
            extra={
                "collection": self.query.collection,
                "offset": self._offset,
                "count": len(self._page),
            },
        )
