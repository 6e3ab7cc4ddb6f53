"""
Read-side helpers over store snapshots: search, pagination and dashboard
aggregates. All functions are pure; pass them whatever `Store.list()` returned.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Dict, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from activity_store.domain.identity import dedupe
from activity_store.domain.models import Activity, Booking, Payout

T = TypeVar("T")

SORTS: Dict[str, Optional[Tuple[Callable[[Activity], object], bool]]] = {
    "relevance": None,
    "price_asc": (lambda a: a.price, False),
    "price_desc": (lambda a: a.price, True),
    "name_asc": (lambda a: a.name.casefold(), False),
    "name_desc": (lambda a: a.name.casefold(), True),
    "rating_desc": (lambda a: a.rating, True),
}


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def _matches(activity: Activity, needle: str) -> bool:
    return any(needle in field.lower() for field in (activity.name, activity.description, activity.category))


def search_activities(
    activities: Iterable[Activity],
    query: str = "",
    categories: Iterable[str] = (),
    price_min: Optional[float] = None,
    price_max: Optional[float] = None,
    sort: str = "relevance",
) -> List[Activity]:
    """
    Filter and sort activities the way the search page does.

    The input is de-duplicated first. `query` matches case-insensitively
    anywhere in name, description or category; `categories` (when non-empty)
    must contain the activity's category; the price range is inclusive.
    """
    if sort not in SORTS:
        raise ValueError(f"Unknown sort '{sort}'. Available: {', '.join(SORTS)}")

    needle = query.strip().lower()
    wanted = set(categories)
    results = [
        a
        for a in dedupe(activities)
        if (not needle or _matches(a, needle))
        and (not wanted or a.category in wanted)
        and (price_min is None or a.price >= price_min)
        and (price_max is None or a.price <= price_max)
    ]

    ordering = SORTS[sort]
    if ordering is not None:
        key, reverse = ordering
        results.sort(key=key, reverse=reverse)
    return results


def paginate(items: Sequence[T], page: int = 1, page_size: int = 9) -> Page[T]:
    """Slice `items` into a page; out-of-range pages are clamped."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    total_pages = max(1, math.ceil(len(items) / page_size))
    current = min(max(1, page), total_pages)
    start = (current - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=current,
        page_size=page_size,
        total_items=len(items),
        total_pages=total_pages,
    )


def categories(activities: Iterable[Activity]) -> List[str]:
    return sorted({a.category for a in activities if a.category})


def top_categories(activities: Iterable[Activity], limit: int = 8) -> List[Tuple[str, int]]:
    """Most common categories with their counts, busiest first."""
    counts = Counter(a.category for a in activities if a.category)
    return counts.most_common(limit)


def featured(activities: Iterable[Activity], limit: int = 6) -> List[Activity]:
    return sorted(activities, key=lambda a: a.rating, reverse=True)[:limit]


def trending(
    activities: Iterable[Activity],
    bookings: Iterable[Booking],
    now: Optional[datetime] = None,
    days: int = 30,
    limit: int = 6,
) -> List[Activity]:
    """
    Activities ranked by seats booked in the last `days` days, then by rating.
    """
    since = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    seats: Counter[str] = Counter()
    for booking in bookings:
        if booking.activity_id is not None and booking.date >= since:
            seats[booking.activity_id] += booking.quantity
    ranked = sorted(activities, key=lambda a: (seats[a.id], a.rating), reverse=True)
    return ranked[:limit]


def bookings_by_day(bookings: Iterable[Booking]) -> Dict[date, List[Booking]]:
    """Group bookings by their (UTC) calendar day, preserving input order."""
    grouped: Dict[date, List[Booking]] = {}
    for booking in bookings:
        grouped.setdefault(booking.date.date(), []).append(booking)
    return grouped


def total_payout(payouts: Iterable[Payout]) -> float:
    return sum(p.amount for p in payouts)


def total_revenue(bookings: Iterable[Booking]) -> float:
    return sum(b.amount for b in bookings)


__all__ = [
    "Page",
    "SORTS",
    "bookings_by_day",
    "categories",
    "featured",
    "paginate",
    "search_activities",
    "top_categories",
    "total_payout",
    "total_revenue",
    "trending",
]
