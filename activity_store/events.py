"""
Process-local change notification bus.

Stores publish payload-less events such as `"activities:changed"` after every
mutation; subscribers re-fetch whatever they display. Dispatch is synchronous
and runs in subscription order.

Usage:
    bus = EventBus()
    unsubscribe = bus.subscribe("bookings:changed", refresh)
    bus.publish("bookings:changed")
    unsubscribe()
"""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, DefaultDict, List

from activity_store.utils.logging import get_logger

log = get_logger(__name__)

Handler = Callable[[], None]
Unsubscribe = Callable[[], None]

ACTIVITIES_CHANGED = "activities:changed"
BOOKINGS_CHANGED = "bookings:changed"
PAYOUTS_CHANGED = "payouts:changed"


@dataclass(eq=False)
class _Subscription:
    handler: Handler
    active: bool = field(default=True)


class EventBus:
    """
    Observer lists keyed by event name.

    Each `subscribe` call creates its own registration, so subscribing the
    same handler twice yields two deliveries per publish and two independent
    unsubscribe callables.
    """

    def __init__(self) -> None:
        self._subscriptions: DefaultDict[str, List[_Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_name: str, handler: Handler) -> Unsubscribe:
        subscription = _Subscription(handler)
        with self._lock:
            self._subscriptions[event_name].append(subscription)

        def unsubscribe() -> None:
            with self._lock:
                if not subscription.active:
                    return
                subscription.active = False
                self._subscriptions[event_name].remove(subscription)

        return unsubscribe

    def publish(self, event_name: str) -> None:
        """
        Invoke every handler registered for `event_name`.

        Handlers run against a snapshot taken at publish time; one that raises
        is logged and the rest still run.
        """
        with self._lock:
            snapshot = list(self._subscriptions.get(event_name, ()))
        log.debug("Publishing event", extra={"event": event_name, "subscribers": len(snapshot)})
        for subscription in snapshot:
            if not subscription.active:
                continue
            try:
                subscription.handler()
            except Exception:  # noqa: BLE001
                log.exception("Event handler failed", extra={"event": event_name})

    def subscriber_count(self, event_name: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(event_name, ()))


__all__ = [
    "ACTIVITIES_CHANGED",
    "BOOKINGS_CHANGED",
    "PAYOUTS_CHANGED",
    "EventBus",
    "Handler",
    "Unsubscribe",
]
