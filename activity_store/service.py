"""
Service facade wiring the three stores over one persistence handle and one bus.

This is the surface consumers program against: fetch lists, add records,
subscribe to change events, and generate sample data. Nothing here is a
module-level singleton; build one service per storage location.

Usage:
    from activity_store.service import ActivityService

    service = ActivityService.from_settings()
    unsubscribe = service.on_bookings_changed(lambda: print(len(service.get_bookings())))
    service.seed_sample_bookings_and_payouts(bookings=10, payouts=0, replace=True)
"""

from __future__ import annotations

import random
from typing import Any, Callable, List, Optional

from activity_store.config import Settings, get_settings
from activity_store.domain.models import Activity, Booking, Payout
from activity_store.domain.normalize import RecordInput
from activity_store.events import (
    ACTIVITIES_CHANGED,
    BOOKINGS_CHANGED,
    PAYOUTS_CHANGED,
    EventBus,
    Unsubscribe,
)
from activity_store.infrastructure.persistence import FileKeyValueStore, KeyValueStore
from activity_store.stores.abstract import Clock
from activity_store.stores.activities import ActivityStore
from activity_store.stores.bookings import BookingStore
from activity_store.stores.payouts import PayoutStore
from activity_store.utils.logging import get_logger

log = get_logger(__name__)


class ActivityService:
    """
    Activities, bookings and payouts behind a single object.

    Parameters
    ----------
    kv : KeyValueStore
        Persistence handle shared by the three stores.
    bus : EventBus | None
        Change notification bus; a private one is created when omitted.
    rng : random.Random | None
        Source of randomness for ids and sample data (seed it in tests).
    clock : Callable[[], datetime] | None
        Time source used for default dates and sample windows.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.kv = kv
        self.bus = bus or EventBus()
        rng = rng or random.Random()
        self.activities = ActivityStore(kv, self.bus, rng=rng, clock=clock)
        self.bookings = BookingStore(kv, self.bus, self.activities, rng=rng, clock=clock)
        self.payouts = PayoutStore(kv, self.bus, rng=rng, clock=clock)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "ActivityService":
        """File-backed service rooted at `settings.storage_dir`."""
        settings = settings or get_settings()
        return cls(FileKeyValueStore.from_settings(settings), **kwargs)

    # ---- Activities ----
    def get_activities(self) -> List[Activity]:
        return self.activities.list()

    def add_activity(self, activity: RecordInput) -> Activity:
        return self.activities.add(activity)

    def get_activity(self, activity_id: Any) -> Optional[Activity]:
        return self.activities.get(activity_id)

    # ---- Bookings ----
    def get_bookings(self) -> List[Booking]:
        return self.bookings.list()

    def add_booking(self, booking: RecordInput) -> Booking:
        return self.bookings.add(booking)

    def clear_bookings(self) -> None:
        self.bookings.clear()

    # ---- Payouts ----
    def get_payouts(self) -> List[Payout]:
        return self.payouts.list()

    def add_payout(self, payout: RecordInput) -> Payout:
        return self.payouts.add(payout)

    def clear_payouts(self) -> None:
        self.payouts.clear()

    # ---- Subscriptions ----
    def on_activities_changed(self, handler: Callable[[], Any]) -> Unsubscribe:
        return self.bus.subscribe(ACTIVITIES_CHANGED, handler)

    def on_bookings_changed(self, handler: Callable[[], Any]) -> Unsubscribe:
        return self.bus.subscribe(BOOKINGS_CHANGED, handler)

    def on_payouts_changed(self, handler: Callable[[], Any]) -> Unsubscribe:
        return self.bus.subscribe(PAYOUTS_CHANGED, handler)

    # ---- Sample data ----
    def seed_sample_bookings_and_payouts(
        self, bookings: int = 8, payouts: int = 3, replace: bool = False
    ) -> None:
        """
        Generate sample bookings, then sample payouts.

        Each store publishes its own change event, including for a zero count.
        """
        self.bookings.seed_sample(bookings, replace=replace)
        self.payouts.seed_sample(payouts, replace=replace)

    def reset(self) -> None:
        """Wipe every persisted key and tell all subscribers to re-fetch."""
        self.kv.clear()
        log.info("Storage reset")
        for event_name in (ACTIVITIES_CHANGED, BOOKINGS_CHANGED, PAYOUTS_CHANGED):
            self.bus.publish(event_name)


__all__ = ["ActivityService"]
