"""In-memory document backend.

All documents are kept in process memory and lost when the instance is
discarded. Use for unit tests, prototyping, or scenarios where durability is
not required.
"""

import copy
import threading
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from ..domain.event import utc_now
from .documents import (
    SERVER_TIMESTAMP,
    Document,
    DocumentBackend,
    DocumentExistsError,
    DocumentQuery,
    DocumentTransaction,
    IndexSpec,
)

T = TypeVar("T")


class InMemoryDocumentTransaction(DocumentTransaction):
    """Transaction that stages writes until the callback completes."""

    def __init__(self, backend: "InMemoryDocumentBackend"):
        self._backend = backend
        self._staged: dict[tuple[str, str], dict[str, Any]] = {}

    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        staged = self._staged.get((collection, key))
        if staged is not None:
            return copy.deepcopy(staged)
        return self._backend._read(collection, key)

    def create(self, collection: str, key: str, data: dict[str, Any]) -> None:
        if self.get(collection, key) is not None:
            raise DocumentExistsError(collection, key)
        self._staged[(collection, key)] = self._backend._stamp(data)

    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        self._staged[(collection, key)] = self._backend._stamp(data)

    def _apply(self) -> None:
        for (collection, key), data in self._staged.items():
            self._backend._collections[collection][key] = data


class InMemoryDocumentBackend(DocumentBackend):
    """Dictionary-based document backend for testing.

    Transactions are serialized by a single re-entrant lock and their writes
    are only applied when the callback returns without raising, which makes
    commits atomic and isolated from each other.

    **NOT suitable for production** due to:
    - No durability (data lost on restart)
    - No distributed coordination
    - Memory usage grows unbounded

    Args:
        clock: Callable returning the timestamp used for ``SERVER_TIMESTAMP``
            fields. Defaults to the current UTC time.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._indexes: dict[str, list[IndexSpec]] = defaultdict(list)
        self._lock = threading.RLock()
        self._clock = clock
        self.query_count = 0

    def query(self, query: DocumentQuery) -> list[Document]:
        with self._lock:
            self.query_count += 1
            matching = [
                Document(id=key, data=copy.deepcopy(data))
                for key, data in self._collections[query.collection].items()
                if all(f.matches(data) for f in query.filters)
            ]

        matching = [d for d in matching if query.order_by in d.data]
        matching.sort(key=lambda d: d.data[query.order_by])
        end = None if query.limit is None else query.offset + query.limit
        return matching[query.offset : end]

    def run_transaction(self, callback: Callable[[DocumentTransaction], T]) -> T:
        with self._lock:
            transaction = InMemoryDocumentTransaction(self)
            result = callback(transaction)
            transaction._apply()
            return result

    def ensure_indexes(self, collection: str, indexes: list[IndexSpec]) -> None:
        with self._lock:
            for spec in indexes:
                if spec not in self._indexes[collection]:
                    self._indexes[collection].append(spec)

    def indexes(self, collection: str) -> list[IndexSpec]:
        """Return the indexes registered on a collection."""
        return list(self._indexes[collection])

    def ping(self) -> None:
        return None

    def documents(self, collection: str) -> dict[str, dict[str, Any]]:
        """Return a copy of every document in a collection, keyed by id."""
        with self._lock:
            return copy.deepcopy(dict(self._collections[collection]))

    def _read(self, collection: str, key: str) -> dict[str, Any] | None:
        data = self._collections[collection].get(key)
        return None if data is None else copy.deepcopy(data)

    def _stamp(self, data: dict[str, Any]) -> dict[str, Any]:
        now = self._clock()
        return {
            name: now if value is SERVER_TIMESTAMP else copy.deepcopy(value)
            for name, value in data.items()
        }
