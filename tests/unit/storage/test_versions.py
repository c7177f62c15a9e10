"""Tests for the version counters."""

import pytest

from interlog.domain import ConcurrencyConflictError
from interlog.storage import DocumentTransaction, InMemoryDocumentBackend, VersionStore

COLLECTION = "event-store/default/streams"


@pytest.fixture
def versions() -> VersionStore:
    return VersionStore(COLLECTION)


def test_missing_counter_reads_as_minus_one(backend: InMemoryDocumentBackend, versions):
    assert backend.run_transaction(lambda tx: versions.read(tx, "order-1")) == -1


def test_first_advance_creates_counter_at_zero(backend: InMemoryDocumentBackend, versions):
    backend.run_transaction(lambda tx: versions.advance(tx, "order-1", -1))

    assert backend.documents(COLLECTION) == {"order-1": {"version": 0}}


def test_advance_increments_observed_value(backend: InMemoryDocumentBackend, versions):
    backend.run_transaction(lambda tx: versions.advance(tx, "order-1", -1))
    backend.run_transaction(lambda tx: versions.advance(tx, "order-1", 0))

    assert backend.run_transaction(lambda tx: versions.read(tx, "order-1")) == 1


def test_advance_by_batch_size(backend: InMemoryDocumentBackend, versions):
    assert backend.run_transaction(lambda tx: versions.advance(tx, "order-1", -1, 3)) == 2
    assert backend.run_transaction(lambda tx: versions.advance(tx, "order-1", 2, 2)) == 4


def test_advance_requires_positive_count(backend: InMemoryDocumentBackend, versions):
    with pytest.raises(ValueError):
        backend.run_transaction(lambda tx: versions.advance(tx, "order-1", -1, 0))


def test_concurrently_created_counter_is_a_conflict(
    backend: InMemoryDocumentBackend, versions
):
    backend.run_transaction(lambda tx: versions.advance(tx, "order-1", -1))

    # A writer that observed the counter as missing before it was created
    def stale_writer(tx: DocumentTransaction) -> None:
        versions.advance(tx, "order-1", -1)

    with pytest.raises(ConcurrencyConflictError) as exc_info:
        backend.run_transaction(stale_writer)

    assert exc_info.value.expected_version == -1
    assert exc_info.value.actual_version == 0
