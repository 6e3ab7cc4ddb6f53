"""
Activity Store - local record store for an activity-booking demo.

This package keeps three collections persisted as JSON arrays in a key-value
store and broadcasts change events so every consumer stays consistent:

- Activities (seeded with a demo catalogue, de-duplicated on add)
- Bookings (weakly linked to activities by id)
- Payouts

It also ships catalogue queries, supplier form validation, a rich reporter and
a typer CLI on top of the stores.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from activity_store.config import Settings, get_settings
from activity_store.domain import (
    Activity,
    Booking,
    Payout,
    dedupe,
    identity_key,
    normalize_activity,
    normalize_booking,
    normalize_payout,
)
from activity_store.events import EventBus
from activity_store.infrastructure import FileKeyValueStore, InMemoryKeyValueStore, KeyValueStore
from activity_store.service import ActivityService
from activity_store.stores import ActivityStore, BookingStore, PayoutStore, RecordStore
from activity_store.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Activity",
    "Booking",
    "Payout",
    "dedupe",
    "identity_key",
    "normalize_activity",
    "normalize_booking",
    "normalize_payout",
    # Persistence and events
    "EventBus",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    # Stores
    "ActivityService",
    "ActivityStore",
    "BookingStore",
    "PayoutStore",
    "RecordStore",
    # Logging
    "configure_logging",
    "get_logger",
]
