"""MongoDB implementation of the document backend.

Collection paths are joined with dots, so the events of the default log live
in the ``event-store.default.events`` collection and the version counters in
``event-store.default.streams``. Document keys are stored as ``_id``.
"""

from collections.abc import Callable
from typing import Any, TypeVar

from pymongo import ASCENDING
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from ...domain.exceptions import BackendUnavailableError
from ...storage.documents import (
    SERVER_TIMESTAMP,
    Document,
    DocumentBackend,
    DocumentExistsError,
    DocumentQuery,
    DocumentTransaction,
    FieldFilter,
    IndexSpec,
)
from .config import MongoDBConfig
from .connection import MongoDBConnectionManager

T = TypeVar("T")

ID_FIELD = "_id"

OPERATORS = {
    "==": "$eq",
    ">": "$gt",
    ">=": "$gte",
    "<": "$lt",
    "<=": "$lte",
}


def to_mongo_filter(filters: tuple[FieldFilter, ...] | list[FieldFilter]) -> dict[str, Any]:
    """Combine field filters into a MongoDB query document.

    Example:
        >>> to_mongo_filter([
        ...     FieldFilter(field="stream", op=">", value="order"),
        ...     FieldFilter(field="stream", op="<=", value="order\\x7f"),
        ... ])
        {'stream': {'$gt': 'order', '$lte': 'order\\x7f'}}
    """
    result: dict[str, dict[str, Any]] = {}
    for f in filters:
        result.setdefault(f.field, {})[OPERATORS[f.op]] = f.value
    return result


def _split_server_timestamps(data: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    fields = {name: value for name, value in data.items() if value is not SERVER_TIMESTAMP}
    stamped = [name for name, value in data.items() if value is SERVER_TIMESTAMP]
    return fields, stamped


class MongoDocumentTransaction(DocumentTransaction):
    """Document reads and writes bound to one MongoDB client session."""

    def __init__(self, backend: "MongoDocumentBackend", session: ClientSession):
        self._backend = backend
        self._session = session

    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        document = self._backend.collection(collection).find_one(
            {ID_FIELD: key}, session=self._session
        )
        if document is None:
            return None
        document.pop(ID_FIELD, None)
        return document

    def create(self, collection: str, key: str, data: dict[str, Any]) -> None:
        fields, stamped = _split_server_timestamps(data)
        target = self._backend.collection(collection)
        try:
            target.insert_one({ID_FIELD: key, **fields}, session=self._session)
        except DuplicateKeyError as e:
            raise DocumentExistsError(collection, key) from e
        self._stamp(target, key, stamped)

    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        fields, stamped = _split_server_timestamps(data)
        target = self._backend.collection(collection)
        target.replace_one({ID_FIELD: key}, fields, upsert=True, session=self._session)
        self._stamp(target, key, stamped)

    def _stamp(self, target: Collection, key: str, stamped: list[str]) -> None:
        if not stamped:
            return
        target.update_one(
            {ID_FIELD: key},
            {"$currentDate": {name: {"$type": "date"} for name in stamped}},
            session=self._session,
        )


class MongoDocumentBackend(DocumentBackend):
    """Document backend on MongoDB.

    Transactions use ``ClientSession.with_transaction``, which lets the
    driver retry transient errors such as write conflicts between concurrent
    commits. Any other driver error surfaces as ``BackendUnavailableError``.

    Examples:
        >>> config = MongoDBConfig(uri="mongodb://localhost:27017/?replicaSet=rs0")
        >>> backend = MongoDocumentBackend(MongoDBConnectionManager(config))
        >>> storage = DocumentEventStorage(backend)
        >>> storage.setup()
    """

    path_separator = "."

    def __init__(self, connection_manager: MongoDBConnectionManager):
        """Initialize the MongoDB document backend.

        Args:
            connection_manager: MongoDB connection manager
        """
        self.connection_manager = connection_manager

    @classmethod
    def from_config(cls, config: MongoDBConfig) -> "MongoDocumentBackend":
        return cls(MongoDBConnectionManager(config))

    def collection(self, path: str) -> Collection:
        """Get the collection stored under ``path``."""
        return self.connection_manager.database[path]

    def query(self, query: DocumentQuery) -> list[Document]:
        try:
            cursor = self.collection(query.collection).find(
                to_mongo_filter(query.filters),
                sort=[(query.order_by, ASCENDING)],
                skip=query.offset,
                limit=query.limit or 0,
            )
            return [Document(id=str(doc.pop(ID_FIELD)), data=doc) for doc in cursor]
        except PyMongoError as e:
            raise BackendUnavailableError(
                f'Could not query "{query.collection}": {e}'
            ) from e

    def run_transaction(self, callback: Callable[[DocumentTransaction], T]) -> T:
        try:
            with self.connection_manager.client.start_session() as session:
                return session.with_transaction(
                    lambda s: callback(MongoDocumentTransaction(self, s)),
                    read_concern=ReadConcern("snapshot"),
                    write_concern=WriteConcern("majority"),
                )
        except PyMongoError as e:
            raise BackendUnavailableError(f"Could not execute transaction: {e}") from e

    def ensure_indexes(self, collection: str, indexes: list[IndexSpec]) -> None:
        target = self.collection(collection)
        try:
            for spec in indexes:
                kwargs: dict[str, Any] = {}
                if spec.unique:
                    kwargs["unique"] = True
                target.create_index(
                    [(name, int(direction)) for name, direction in spec.keys], **kwargs
                )
        except PyMongoError as e:
            raise BackendUnavailableError(
                f'Could not create indexes on "{collection}": {e}'
            ) from e

    def ping(self) -> None:
        try:
            self.connection_manager.client.admin.command("ping")
        except PyMongoError as e:
            raise BackendUnavailableError(f"Could not connect to MongoDB: {e}") from e
