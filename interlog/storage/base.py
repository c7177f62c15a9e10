"""Event storage interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from enum import IntEnum

from ..domain.event import RecordedEvent, WritableEvent
from ..domain.streams import StreamSelector
from .status import StorageStatus


class ExpectedVersion(IntEnum):
    """Special values for the ``expected_version`` of a commit."""

    ANY = -2
    """Skip the optimistic concurrency check."""

    NO_STREAM = -1
    """The stream must not contain any events yet."""


class EventStorage(ABC):
    """Abstract interface for durable event persistence.

    EventStorage persists events as an immutable, append-only log. Every
    event belongs to one concrete stream and gets two numbers when it is
    committed: a sequence number ordering it within the whole log and a
    version ordering it within its stream.

    Key responsibilities:
    - **Ordering**: Reads always return events by ascending sequence number
    - **Concurrency Control**: Optimistic locking via expected_version
    - **Idempotency**: An event identifier can only be committed once
    - **Atomicity**: A commit is written completely or not at all
    """

    @abstractmethod
    def load(
        self,
        stream: "str | StreamSelector",
        minimum_sequence_number: int = 0,
    ) -> Iterator[RecordedEvent]:
        """Read the events of a stream in global order.

        Args:
            stream: A concrete stream name, a category (``"$ce-order"``),
                the all-stream (``"$all"``) or a selector.
            minimum_sequence_number: Skip events with a lower sequence number.

        Returns:
            A lazy, restartable sequence of recorded events.

        Raises:
            InvalidStreamSelectorError: For unsupported virtual stream names.
        """
        ...

    @abstractmethod
    def commit(
        self,
        stream: "str | StreamSelector",
        events: Sequence[WritableEvent],
        expected_version: int = ExpectedVersion.ANY,
    ) -> None:
        """Append events to a concrete stream atomically.

        Args:
            stream: The concrete stream to append to.
            events: Events to append, in order.
            expected_version: The stream's current version as known by the
                caller, ``ExpectedVersion.NO_STREAM`` for a new stream, or
                ``ExpectedVersion.ANY`` to skip the check.

        Raises:
            InvalidStreamSelectorError: If ``stream`` is not a concrete stream.
            ConcurrencyConflictError: If ``expected_version`` does not match.
            DuplicateEventError: If an event identifier already exists.
            BackendUnavailableError: If the database cannot be reached.
        """
        ...

    @abstractmethod
    def status(self) -> StorageStatus:
        """Report on the storage without changing it."""
        ...

    @abstractmethod
    def setup(self) -> StorageStatus:
        """Prepare the storage (indexes, ...) and report on it."""
        ...
