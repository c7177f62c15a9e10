"""Document database port used by the event storage.

The event storage only needs a handful of primitives from a document
database: ordered range queries over one collection, transactions that read
and write individual documents by key, index creation and a connectivity
check. This module defines those primitives so the storage logic can run on
top of any backend that provides them.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")

FilterOperator = Literal["==", ">", ">=", "<", "<="]


class _ServerTimestamp:
    """Sentinel replaced by the backend's clock when a document is written."""

    _instance: "_ServerTimestamp | None" = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class DocumentExistsError(Exception):
    """Raised by a transaction when creating a document whose key is taken."""

    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f'Document "{key}" already exists in "{collection}"')


class IndexDirection(IntEnum):
    """Sort direction for index fields."""

    ASC = 1
    """Ascending order (1)."""

    DESC = -1
    """Descending order (-1)."""


class IndexSpec(BaseModel):
    """Specification for a collection index.

    Example:
        >>> IndexSpec(
        ...     keys=[
        ...         ("stream", IndexDirection.ASC),
        ...         ("sequenceNumber", IndexDirection.ASC),
        ...     ],
        ... )
    """

    model_config = ConfigDict(frozen=True)

    keys: list[tuple[str, IndexDirection]]
    """(field_name, direction) tuples."""

    unique: bool = False
    """If True, enforce uniqueness."""


class FieldFilter(BaseModel):
    """A single comparison constraint on a document field."""

    model_config = ConfigDict(frozen=True)

    field: str
    op: FilterOperator
    value: Any

    def matches(self, document: dict[str, Any]) -> bool:
        """Evaluate the constraint against a document's data.

        Documents missing the field never match.
        """
        if self.field not in document:
            return False
        actual = document[self.field]
        if self.op == "==":
            return bool(actual == self.value)
        try:
            if self.op == ">":
                return bool(actual > self.value)
            if self.op == ">=":
                return bool(actual >= self.value)
            if self.op == "<":
                return bool(actual < self.value)
            return bool(actual <= self.value)
        except TypeError:
            return False


class DocumentQuery(BaseModel):
    """An ordered, filtered and paginated query over one collection.

    Attributes:
        collection: Path of the collection to query.
        filters: Constraints that all have to match (logical AND).
        order_by: Field the results are sorted by, ascending.
        offset: Number of matching documents to skip.
        limit: Maximum number of documents to return (None for all).
    """

    model_config = ConfigDict(frozen=True)

    collection: str
    filters: tuple[FieldFilter, ...] = ()
    order_by: str
    offset: int = 0
    limit: int | None = None

    def page(self, offset: int, limit: int) -> "DocumentQuery":
        """Return a copy of this query restricted to one page."""
        return self.model_copy(update={"offset": offset, "limit": limit})


@dataclass(frozen=True)
class Document:
    """A document as returned by a backend: its key and its fields."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


class DocumentTransaction(ABC):
    """Reads and writes executed atomically inside one backend transaction.

    Writes performed through a transaction become visible together when the
    transaction callback returns, or not at all if it raises.
    """

    @abstractmethod
    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        """Read a document by key.

        Returns:
            The document's fields, or None if it does not exist.
        """
        ...

    @abstractmethod
    def create(self, collection: str, key: str, data: dict[str, Any]) -> None:
        """Create a new document.

        Fields set to ``SERVER_TIMESTAMP`` are filled in by the backend.

        Raises:
            DocumentExistsError: If a document with this key already exists.
        """
        ...

    @abstractmethod
    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        """Create or overwrite a document."""
        ...


class DocumentBackend(ABC):
    """Abstract document database used by the event storage.

    Implementations translate failures to reach the database into
    ``BackendUnavailableError``. ``DocumentExistsError`` and any exception
    raised by a transaction callback propagate unchanged.
    """

    path_separator: str = "/"

    def collection_path(self, *segments: str) -> str:
        """Join collection and document names into a collection path.

        Example:
            >>> backend.collection_path("event-store", "default", "events")
            'event-store/default/events'
        """
        return self.path_separator.join(segments)

    @abstractmethod
    def query(self, query: DocumentQuery) -> list[Document]:
        """Execute a query outside of any transaction."""
        ...

    @abstractmethod
    def run_transaction(self, callback: Callable[[DocumentTransaction], T]) -> T:
        """Run ``callback`` inside one atomic transaction.

        Returns:
            Whatever the callback returns.
        """
        ...

    @abstractmethod
    def ensure_indexes(self, collection: str, indexes: list[IndexSpec]) -> None:
        """Create the given indexes on a collection if they do not exist."""
        ...

    @abstractmethod
    def ping(self) -> None:
        """Check that the database can be reached.

        Raises:
            BackendUnavailableError: If it cannot.
        """
        ...
