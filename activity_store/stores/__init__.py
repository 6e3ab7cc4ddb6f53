"""
Stores package for the Activity Store.

Re-exports the base class and the three concrete stores so downstream code can
import from `activity_store.stores` directly.
"""

from activity_store.stores.abstract import RecordStore
from activity_store.stores.activities import ACTIVITIES_KEY, DEMO_ACTIVITIES, ActivityStore
from activity_store.stores.bookings import BOOKINGS_KEY, BookingStore
from activity_store.stores.payouts import PAYOUTS_KEY, PayoutStore

__all__ = [
    # Base
    "RecordStore",
    # Concrete stores
    "ActivityStore",
    "BookingStore",
    "PayoutStore",
    # Persistence keys
    "ACTIVITIES_KEY",
    "BOOKINGS_KEY",
    "PAYOUTS_KEY",
    "DEMO_ACTIVITIES",
]
