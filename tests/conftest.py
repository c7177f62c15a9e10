"""Central test fixtures."""

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any

import pytest

from interlog import DocumentEventStorage, InMemoryDocumentBackend, WritableEvent

EPOCH = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """A deterministic clock advancing one second per call."""
    ticks: Iterator[int] = count()

    def now() -> datetime:
        return EPOCH + timedelta(seconds=next(ticks))

    return now


@pytest.fixture
def backend(clock: Callable[[], datetime]) -> InMemoryDocumentBackend:
    """Create an in-memory document backend."""
    return InMemoryDocumentBackend(clock=clock)


@pytest.fixture
def storage(backend: InMemoryDocumentBackend) -> DocumentEventStorage:
    """Create an event storage on the in-memory backend."""
    return DocumentEventStorage(backend)


@pytest.fixture
def make_event() -> Callable[..., WritableEvent]:
    """Factory for writable events."""

    def factory(type: str = "SomethingHappened", **payload: Any) -> WritableEvent:
        return WritableEvent(type=type, payload=payload)

    return factory
