"""
Pytest configuration for the Activity Store.

Provides fixtures for:
- In-memory and file-backed persistence
- A shared event bus plus an event recorder
- Deterministic randomness and a fixed clock
- Settings/environment isolation for CLI tests
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Generator, Iterable

import pytest

from activity_store.config import get_settings
from activity_store.events import ACTIVITIES_CHANGED, BOOKINGS_CHANGED, PAYOUTS_CHANGED, EventBus
from activity_store.infrastructure.persistence import FileKeyValueStore, InMemoryKeyValueStore
from activity_store.service import ActivityService
from activity_store.stores import ActivityStore, BookingStore, PayoutStore

FIXED_NOW = datetime(2026, 3, 15, 9, 30, tzinfo=timezone.utc)
RNG_SEED = 42


class EventRecorder:
    """Counts deliveries per event name."""

    def __init__(self, bus: EventBus, names: Iterable[str]) -> None:
        self.counts: Counter[str] = Counter()
        self.order: list[str] = []
        for name in names:
            bus.subscribe(name, self._handler(name))

    def _handler(self, name: str) -> Callable[[], None]:
        def handle() -> None:
            self.counts[name] += 1
            self.order.append(name)

        return handle


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(RNG_SEED)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now: datetime) -> Callable[[], datetime]:
    return lambda: fixed_now


@pytest.fixture
def recorder(bus: EventBus) -> EventRecorder:
    return EventRecorder(bus, [ACTIVITIES_CHANGED, BOOKINGS_CHANGED, PAYOUTS_CHANGED])


@pytest.fixture
def activity_store(kv, bus, rng, clock) -> ActivityStore:
    return ActivityStore(kv, bus, rng=rng, clock=clock)


@pytest.fixture
def booking_store(kv, bus, activity_store, rng, clock) -> BookingStore:
    return BookingStore(kv, bus, activity_store, rng=rng, clock=clock)


@pytest.fixture
def payout_store(kv, bus, rng, clock) -> PayoutStore:
    return PayoutStore(kv, bus, rng=rng, clock=clock)


@pytest.fixture
def service(kv, bus, rng, clock) -> ActivityService:
    return ActivityService(kv, bus=bus, rng=rng, clock=clock)


@pytest.fixture
def file_kv(tmp_path: Path) -> FileKeyValueStore:
    return FileKeyValueStore(tmp_path / "storage", attempts=3, backoff_seconds=0)


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """
    Point the CLI at a throwaway storage directory.

    Clears the cached settings on both sides so the env overrides are picked up
    and nothing leaks into other tests.
    """
    storage = tmp_path / "cli-storage"
    monkeypatch.setenv("LAP_STORAGE_DIR", str(storage))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LAP_WRITE_BACKOFF_SECONDS", "0")
    monkeypatch.setenv("COLUMNS", "200")
    get_settings.cache_clear()
    yield storage
    get_settings.cache_clear()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
