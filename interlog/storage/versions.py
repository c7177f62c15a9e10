"""Per-stream version counters."""

import logging

from ..domain.exceptions import ConcurrencyConflictError
from .documents import DocumentExistsError, DocumentTransaction

LOGGER = logging.getLogger(__name__)

NO_VERSION = -1
ALL_STREAM_COUNTER = "all"
VERSION_FIELD = "version"


class VersionStore:
    """Reads and advances the version counter documents of a collection.

    Each concrete stream owns one counter document keyed by its name and
    the whole log owns the reserved ``"all"`` counter. A missing counter
    reads as ``-1``.

    Counters must be read and advanced through the same transaction, so a
    concurrent commit touching the same counter is detected by the backend
    instead of overwriting it.

    Args:
        collection: Path of the collection holding the counter documents.
    """

    def __init__(self, collection: str):
        self.collection = collection

    def read(self, transaction: DocumentTransaction, key: str) -> int:
        """Return the counter for ``key``, or ``-1`` if it does not exist."""
        document = transaction.get(self.collection, key)
        if document is None:
            return NO_VERSION
        return int(document[VERSION_FIELD])

    def advance(
        self,
        transaction: DocumentTransaction,
        key: str,
        observed: int,
        count: int = 1,
    ) -> int:
        """Move the counter ``count`` steps past the observed value.

        Args:
            transaction: The transaction that read ``observed``.
            key: Counter key.
            observed: Value returned by :meth:`read` in this transaction.
            count: Number of events appended.

        Returns:
            The new counter value.

        Raises:
            ConcurrencyConflictError: If the counter did not exist when read
                but was created by a concurrent writer in the meantime.
        """
        if count < 1:
            raise ValueError("count must be >= 1")

        new_value = observed + count
        if observed == NO_VERSION:
            try:
                transaction.create(self.collection, key, {VERSION_FIELD: new_value})
            except DocumentExistsError as e:
                actual = self.read(transaction, key)
                LOGGER.info(
                    "Version counter created concurrently",
                    extra={"counter": key, "actual_version": actual},
                )
                raise ConcurrencyConflictError(key, observed, actual) from e
        else:
            transaction.set(self.collection, key, {VERSION_FIELD: new_value})
        return new_value
