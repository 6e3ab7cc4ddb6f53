"""
Domain package for the Activity Store.

Exports the record models plus the normalization and identity helpers used by
the stores. Keep this package focused on data definitions and coercion rules.
"""

from activity_store.domain.identity import dedupe, identity_key, signature
from activity_store.domain.models import PAYOUT_STATUSES, Activity, Booking, Payout
from activity_store.domain.normalize import (
    normalize_activity,
    normalize_booking,
    normalize_payout,
    placeholder_image_url,
)

__all__ = [
    "Activity",
    "Booking",
    "Payout",
    "PAYOUT_STATUSES",
    "dedupe",
    "identity_key",
    "signature",
    "normalize_activity",
    "normalize_booking",
    "normalize_payout",
    "placeholder_image_url",
]
