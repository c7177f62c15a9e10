"""Exceptions raised by the event storage."""


class EventStoreError(Exception):
    """Base class for all event storage errors."""

    pass


class InvalidStreamSelectorError(EventStoreError, ValueError):
    """Raised when a stream name cannot be used for the requested operation.

    Examples are unsupported virtual stream names (``"$foo"``) or writes
    addressed to a category or the all-stream.
    """

    pass


class ConcurrencyConflictError(EventStoreError):
    """Raised when an optimistic concurrency check fails.

    This exception indicates that another writer appended to the stream
    between when the caller loaded it and when the commit was attempted.
    The caller is expected to reload its state and retry the whole operation.

    Attributes:
        stream_name: The stream the commit was addressed to.
        expected_version: The version the caller expected.
        actual_version: The version found in the store.
    """

    def __init__(self, stream_name: str, expected_version: int, actual_version: int):
        self.stream_name = stream_name
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Expected version {expected_version}, but have {actual_version} "
            f'on stream "{stream_name}"'
        )


class DuplicateEventError(EventStoreError):
    """Raised when an event identifier already exists in the log.

    Attributes:
        identifier: The offending event identifier.
    """

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f'Event with identifier "{identifier}" already exists')


class BackendUnavailableError(EventStoreError):
    """Raised when the document database cannot be reached or a transaction
    could not be executed."""

    pass
