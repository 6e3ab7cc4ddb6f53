"""
Activities store: seeded on first read, de-duplicated on every add.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from activity_store.domain.identity import dedupe, signature
from activity_store.domain.models import Activity
from activity_store.domain.normalize import RecordInput, normalize_activity, placeholder_image_url
from activity_store.events import ACTIVITIES_CHANGED
from activity_store.stores.abstract import RecordStore
from activity_store.utils.logging import get_logger

log = get_logger(__name__)

ACTIVITIES_KEY = "lap_activities"

DEMO_ACTIVITIES: Tuple[Dict[str, Any], ...] = (
    {
        "id": "ex_1",
        "name": "Old Delhi Food Walk",
        "description": "Guided tasting tour through Chandni Chowk with street eats.",
        "category": "Food",
        "price": 1200,
        "rating": 4.6,
        "imageUrl": placeholder_image_url("delhi-food-walk"),
    },
    {
        "id": "ex_2",
        "name": "Goa Kayaking Sunset",
        "description": "Leisurely paddle through calm backwaters at golden hour.",
        "category": "Water Sports",
        "price": 1800,
        "rating": 4.4,
        "imageUrl": placeholder_image_url("goa-kayak-sunset"),
    },
    {
        "id": "ex_3",
        "name": "Hampi Heritage Cycle Tour",
        "description": "Morning cycle past ruins and boulder hills with guide.",
        "category": "Sightseeing",
        "price": 1500,
        "rating": 4.7,
        "imageUrl": placeholder_image_url("hampi-cycle"),
    },
)


class ActivityStore(RecordStore[Activity]):
    """
    The supplier's catalogue.

    A store with nothing persisted (or an unreadable value) is seeded with
    `DEMO_ACTIVITIES` when first read, and the seed is persisted immediately.
    A stored empty list, as left by `clear`, stays empty. `add` is a silent
    no-op when the new activity shares an id, or a name and price, with one
    already stored.
    """

    key = ACTIVITIES_KEY
    event_name = ACTIVITIES_CHANGED

    def normalize(self, source: RecordInput) -> Activity:
        return normalize_activity(source, rng=self._rng)

    def list(self) -> List[Activity]:
        with self._lock:
            return self._load_or_seed()

    def add(self, source: RecordInput) -> Activity:
        record = self.normalize(source)
        with self._lock:
            existing = self._load_or_seed()
            if self._is_duplicate(record, existing):
                log.debug(
                    "Duplicate activity ignored",
                    extra={"activity_id": record.id, "signature": signature(record)},
                )
                return record
            self._save(dedupe([*existing, record]))
        log.info("Activity added", extra={"activity_id": record.id, "activity_name": record.name})
        self._publish()
        return record

    def get(self, activity_id: Any) -> Optional[Activity]:
        """Look an activity up by id; None when nothing matches."""
        if activity_id is None:
            return None
        wanted = str(activity_id)
        return next((a for a in self.list() if a.id == wanted), None)

    def _prepare(self, records: List[Activity]) -> List[Activity]:
        return dedupe(records)

    def _load_or_seed(self) -> List[Activity]:
        raw = self._kv.read(self.key)
        if isinstance(raw, list):
            return self._load_items(raw)
        if raw is not None:
            log.warning("Stored value is not a list; reseeding", extra={"store": self.key})
        seeded = [self.normalize(item) for item in DEMO_ACTIVITIES]
        self._save(seeded)
        log.info("Activities store seeded", extra={"count": len(seeded)})
        return seeded

    @staticmethod
    def _is_duplicate(record: Activity, existing: List[Activity]) -> bool:
        wanted = signature(record)
        return any(a.id == record.id or signature(a) == wanted for a in existing)


__all__ = ["ACTIVITIES_KEY", "ActivityStore", "DEMO_ACTIVITIES"]
