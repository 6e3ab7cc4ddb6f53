"""
Base class and shared plumbing for the record stores.

Concrete stores (activities, bookings, payouts) subclass RecordStore, set the
persisted `key` and the `event_name` they publish, and implement `normalize`.
Everything else (load, persist, clear, change notification) lives here so the
three stores behave the same way.
"""

from __future__ import annotations

import abc
import random
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Generic, Iterable, List, Mapping, Optional, TypeVar

from activity_store.domain.models import Activity, Booking, Payout
from activity_store.domain.normalize import RecordInput
from activity_store.events import EventBus
from activity_store.infrastructure.persistence import KeyValueStore
from activity_store.utils.logging import get_logger

log = get_logger(__name__)

R = TypeVar("R", Activity, Booking, Payout)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis() -> int:
    return int(time.time() * 1000)


def noon_on_offset(now: datetime, offset_days: int) -> datetime:
    """Midday (UTC) `offset_days` days away from `now`."""
    day = now.astimezone(timezone.utc) + timedelta(days=offset_days)
    return day.replace(hour=12, minute=0, second=0, microsecond=0)


class RecordStore(abc.ABC, Generic[R]):
    """
    A persisted, ordered list of one record kind with change notification.

    Attributes
    ----------
    key : str
        Logical persistence key of the JSON array.
    event_name : str
        Event published on the bus after every mutation.

    Read-modify-write sequences hold a re-entrant lock; events are published
    after the lock is released so handlers may call straight back into any store.
    """

    key: str
    event_name: str

    def __init__(
        self,
        kv: KeyValueStore,
        bus: EventBus,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._kv = kv
        self._bus = bus
        self._rng = rng or random.Random()
        self._clock = clock or utc_now
        self._lock = threading.RLock()

    @abc.abstractmethod
    def normalize(self, source: RecordInput) -> R:
        """Coerce loosely-shaped input into a canonical record."""
        raise NotImplementedError

    def list(self) -> List[R]:
        """Current records, in stored order."""
        with self._lock:
            return self._load()

    def add(self, source: RecordInput) -> R:
        """Normalize `source`, prepend it, persist and publish."""
        record = self.normalize(source)
        with self._lock:
            records = [record, *self._load()]
            self._save(records)
        log.info("Record added", extra={"store": self.key, "record_id": record.id})
        self._publish()
        return record

    def clear(self) -> None:
        with self._lock:
            self._save([])
        log.info("Store cleared", extra={"store": self.key})
        self._publish()

    def _load(self) -> List[R]:
        raw = self._kv.read(self.key, [])
        if not isinstance(raw, list):
            log.warning("Stored value is not a list; treated as empty", extra={"store": self.key})
            return []
        return self._load_items(raw)

    def _load_items(self, raw: List[Any]) -> List[R]:
        """
        Normalize a stored list, writing it back when it was not canonical.

        Normalization may fill in ids and dates; persisting the result keeps
        them stable across reads.
        """
        records = self._prepare([self.normalize(item) for item in raw if isinstance(item, Mapping)])
        canonical = [record.to_json() for record in records]
        if canonical != raw:
            log.info("Stored records rewritten in canonical form", extra={"store": self.key, "count": len(records)})
            self._kv.write(self.key, canonical)
        return records

    def _prepare(self, records: List[R]) -> List[R]:
        return records

    def _save(self, records: Iterable[R]) -> None:
        self._kv.write(self.key, [record.to_json() for record in records])

    def _publish(self) -> None:
        self._bus.publish(self.event_name)

    def subscribe(self, handler: Callable[[], Any]) -> Callable[[], None]:
        """Shortcut for `bus.subscribe(store.event_name, handler)`."""
        return self._bus.subscribe(self.event_name, handler)


__all__ = [
    "Clock",
    "RecordStore",
    "epoch_millis",
    "noon_on_offset",
    "utc_now",
]
