"""
Bookings store, including synthetic sample generation.
"""

from __future__ import annotations

import random
from datetime import datetime
from typing import List, Optional, Tuple

from activity_store.domain.models import Activity, Booking
from activity_store.domain.normalize import RecordInput, normalize_booking
from activity_store.events import BOOKINGS_CHANGED, EventBus
from activity_store.infrastructure.persistence import KeyValueStore
from activity_store.stores.abstract import Clock, RecordStore, epoch_millis, noon_on_offset
from activity_store.stores.activities import ActivityStore
from activity_store.utils.logging import get_logger

log = get_logger(__name__)

BOOKINGS_KEY = "lap_bookings"

SAMPLE_CUSTOMERS: Tuple[str, ...] = (
    "A. Sharma",
    "R. Iyer",
    "K. Singh",
    "P. Gupta",
    "N. Rao",
    "S. Das",
)
# Sample dates fall on day offsets -7..+13 (inclusive) from today.
SAMPLE_DAY_WINDOW = (-7, 13)
SAMPLE_MAX_QUANTITY = 4


class BookingStore(RecordStore[Booking]):
    """
    Newest-first list of bookings.

    Bookings point at activities by id only; use `activity_for` to resolve the
    reference, which may legitimately come back empty.
    """

    key = BOOKINGS_KEY
    event_name = BOOKINGS_CHANGED

    def __init__(
        self,
        kv: KeyValueStore,
        bus: EventBus,
        activities: ActivityStore,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(kv, bus, rng=rng, clock=clock)
        self._activities = activities

    def normalize(self, source: RecordInput) -> Booking:
        return normalize_booking(source, rng=self._rng, now=self._clock())

    def activity_for(self, booking: Booking) -> Optional[Activity]:
        return self._activities.get(booking.activity_id)

    def seed_sample(self, count: int, replace: bool = False) -> None:
        """
        Generate `count` synthetic bookings against existing activities.

        With `replace` the current list is discarded first; otherwise the new
        bookings go in front of it. The change event fires even when `count`
        is zero.
        """
        activities = self._activities.list()
        now = self._clock()
        stamp = epoch_millis()
        with self._lock:
            records = [] if replace else self._load()
            generated = 0
            if activities:
                for i in range(max(0, count)):
                    records.insert(0, self._sample(i, stamp, now, activities))
                    generated += 1
            elif count > 0:
                log.warning("No activities to link sample bookings to", extra={"requested": count})
            self._save(records)
        log.info(
            "Sample bookings generated",
            extra={"generated": generated, "replace": replace, "total": len(records)},
        )
        self._publish()

    def _sample(self, index: int, stamp: int, now: datetime, activities: List[Activity]) -> Booking:
        activity = self._rng.choice(activities)
        quantity = self._rng.randint(1, SAMPLE_MAX_QUANTITY)
        low, high = SAMPLE_DAY_WINDOW
        return Booking(
            id=f"{stamp}_{index}_b",
            activity_id=activity.id,
            activity_name=activity.name,
            customer_name=self._rng.choice(SAMPLE_CUSTOMERS),
            quantity=quantity,
            amount=quantity * activity.price,
            date=noon_on_offset(now, self._rng.randint(low, high)),
        )


__all__ = ["BOOKINGS_KEY", "BookingStore", "SAMPLE_CUSTOMERS", "SAMPLE_DAY_WINDOW"]
