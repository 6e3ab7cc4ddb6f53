"""
Payouts store, including synthetic sample generation.
"""

from __future__ import annotations

from datetime import datetime

from activity_store.domain.models import PAYOUT_STATUSES, Payout
from activity_store.domain.normalize import RecordInput, normalize_payout
from activity_store.events import PAYOUTS_CHANGED
from activity_store.stores.abstract import RecordStore, epoch_millis, noon_on_offset
from activity_store.utils.logging import get_logger

log = get_logger(__name__)

PAYOUTS_KEY = "lap_payouts"

SAMPLE_DAY_WINDOW = (-14, 13)
SAMPLE_AMOUNT_RANGE = (2000, 9999)


class PayoutStore(RecordStore[Payout]):
    """Newest-first list of supplier payouts."""

    key = PAYOUTS_KEY
    event_name = PAYOUTS_CHANGED

    def normalize(self, source: RecordInput) -> Payout:
        return normalize_payout(source, rng=self._rng, now=self._clock())

    def seed_sample(self, count: int, replace: bool = False) -> None:
        """Same contract as `BookingStore.seed_sample`, for payouts."""
        now = self._clock()
        stamp = epoch_millis()
        with self._lock:
            records = [] if replace else self._load()
            for i in range(max(0, count)):
                records.insert(0, self._sample(i, stamp, now))
            self._save(records)
        log.info(
            "Sample payouts generated",
            extra={"generated": max(0, count), "replace": replace, "total": len(records)},
        )
        self._publish()

    def _sample(self, index: int, stamp: int, now: datetime) -> Payout:
        low, high = SAMPLE_DAY_WINDOW
        return Payout(
            id=f"{stamp}_{index}_p",
            amount=float(self._rng.randint(*SAMPLE_AMOUNT_RANGE)),
            status=self._rng.choice(PAYOUT_STATUSES),
            date=noon_on_offset(now, self._rng.randint(low, high)),
        )


__all__ = ["PAYOUTS_KEY", "PayoutStore", "SAMPLE_AMOUNT_RANGE", "SAMPLE_DAY_WINDOW"]
