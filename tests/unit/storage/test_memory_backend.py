"""Tests for the in-memory document backend."""

from datetime import datetime, timezone

import pytest

from interlog.storage import (
    SERVER_TIMESTAMP,
    DocumentExistsError,
    DocumentQuery,
    DocumentTransaction,
    FieldFilter,
    InMemoryDocumentBackend,
)


def seed(backend: InMemoryDocumentBackend, collection: str, documents: dict[str, dict]) -> None:
    def write(tx: DocumentTransaction) -> None:
        for key, data in documents.items():
            tx.create(collection, key, data)

    backend.run_transaction(write)


def test_create_and_get(backend: InMemoryDocumentBackend):
    seed(backend, "things", {"a": {"n": 1}})

    assert backend.run_transaction(lambda tx: tx.get("things", "a")) == {"n": 1}
    assert backend.run_transaction(lambda tx: tx.get("things", "b")) is None


def test_create_existing_key_fails(backend: InMemoryDocumentBackend):
    seed(backend, "things", {"a": {"n": 1}})

    with pytest.raises(DocumentExistsError) as exc_info:
        seed(backend, "things", {"a": {"n": 2}})

    assert exc_info.value.collection == "things"
    assert exc_info.value.key == "a"


def test_set_overwrites(backend: InMemoryDocumentBackend):
    seed(backend, "things", {"a": {"n": 1}})

    backend.run_transaction(lambda tx: tx.set("things", "a", {"n": 2}))

    assert backend.documents("things") == {"a": {"n": 2}}


def test_failed_transaction_applies_nothing(backend: InMemoryDocumentBackend):
    def failing(tx: DocumentTransaction) -> None:
        tx.create("things", "a", {"n": 1})
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        backend.run_transaction(failing)

    assert backend.documents("things") == {}


def test_transaction_reads_its_own_writes(backend: InMemoryDocumentBackend):
    def write_then_read(tx: DocumentTransaction) -> dict | None:
        tx.create("things", "a", {"n": 1})
        return tx.get("things", "a")

    assert backend.run_transaction(write_then_read) == {"n": 1}


def test_server_timestamp_uses_clock():
    now = datetime(2025, 6, 1, tzinfo=timezone.utc)
    backend = InMemoryDocumentBackend(clock=lambda: now)

    seed(backend, "things", {"a": {"at": SERVER_TIMESTAMP}})

    assert backend.documents("things") == {"a": {"at": now}}


def test_query_filters_sorts_and_paginates(backend: InMemoryDocumentBackend):
    seed(
        backend,
        "things",
        {
            "c": {"n": 3, "kind": "x"},
            "a": {"n": 1, "kind": "x"},
            "b": {"n": 2, "kind": "y"},
            "d": {"n": 4, "kind": "x"},
            "e": {"kind": "x"},
        },
    )
    query = DocumentQuery(
        collection="things",
        filters=(FieldFilter(field="kind", op="==", value="x"),),
        order_by="n",
    )

    assert [d.id for d in backend.query(query)] == ["a", "c", "d"]
    assert [d.id for d in backend.query(query.page(1, 1))] == ["c"]
    assert [d.id for d in backend.query(query.page(3, 10))] == []


def test_query_results_are_copies(backend: InMemoryDocumentBackend):
    seed(backend, "things", {"a": {"n": 1}})
    query = DocumentQuery(collection="things", order_by="n")

    backend.query(query)[0].data["n"] = 99

    assert backend.documents("things") == {"a": {"n": 1}}


@pytest.mark.parametrize(
    ("op", "value", "expected"),
    [
        ("==", 2, True),
        (">", 1, True),
        (">", 2, False),
        (">=", 2, True),
        ("<", 2, False),
        ("<=", 2, True),
    ],
)
def test_field_filter_operators(op, value, expected):
    assert FieldFilter(field="n", op=op, value=value).matches({"n": 2}) is expected


def test_field_filter_missing_field_never_matches():
    assert not FieldFilter(field="n", op="==", value=None).matches({})


def test_field_filter_incomparable_types_do_not_match():
    assert not FieldFilter(field="n", op=">", value="a").matches({"n": 2})
