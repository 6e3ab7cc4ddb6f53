from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from activity_store.domain.normalize import normalize_activity, normalize_booking, normalize_payout
from activity_store.queries import (
    bookings_by_day,
    categories,
    featured,
    paginate,
    search_activities,
    top_categories,
    total_payout,
    total_revenue,
    trending,
)

NOW = datetime(2026, 3, 15, 12, tzinfo=timezone.utc)

CATALOGUE = [
    normalize_activity({"id": "a", "name": "Old Delhi Food Walk", "category": "Food", "price": 1200, "rating": 4.6}),
    normalize_activity({"id": "b", "name": "Goa Kayaking", "category": "Water Sports", "price": 1800, "rating": 4.4}),
    normalize_activity(
        {"id": "c", "name": "Hampi Cycle", "description": "ruins by bike", "category": "Sightseeing", "price": 1500}
    ),
    normalize_activity({"id": "d", "name": "Spice Farm Lunch", "category": "Food", "price": 900, "rating": 3.9}),
]


def test_search_without_filters_keeps_order() -> None:
    assert [a.id for a in search_activities(CATALOGUE)] == ["a", "b", "c", "d"]


def test_search_matches_name_description_or_category() -> None:
    assert [a.id for a in search_activities(CATALOGUE, query="FOOD")] == ["a", "d"]
    assert [a.id for a in search_activities(CATALOGUE, query="bike")] == ["c"]
    assert [a.id for a in search_activities(CATALOGUE, query="  water ")] == ["b"]


def test_search_category_and_inclusive_price_range() -> None:
    found = search_activities(CATALOGUE, categories=["Food", "Sightseeing"], price_min=1000, price_max=1500)

    assert [a.id for a in found] == ["a", "c"]


@pytest.mark.parametrize(
    ("sort", "expected"),
    [
        ("price_asc", ["d", "a", "c", "b"]),
        ("price_desc", ["b", "c", "a", "d"]),
        ("name_asc", ["b", "c", "a", "d"]),
        ("name_desc", ["d", "a", "c", "b"]),
        ("rating_desc", ["a", "b", "d", "c"]),
    ],
)
def test_search_sorting(sort, expected) -> None:
    assert [a.id for a in search_activities(CATALOGUE, sort=sort)] == expected


def test_search_rejects_unknown_sort() -> None:
    with pytest.raises(ValueError, match="Unknown sort"):
        search_activities(CATALOGUE, sort="cheapest")


def test_search_deduplicates_input() -> None:
    duplicated = CATALOGUE + [normalize_activity({"id": "a", "name": "copy"})]

    assert len(search_activities(duplicated)) == len(CATALOGUE)


def test_paginate_clamps_out_of_range_pages() -> None:
    items = list(range(20))

    first = paginate(items, page=0, page_size=9)
    last = paginate(items, page=99, page_size=9)

    assert first.page == 1 and first.items == list(range(9))
    assert not first.has_previous and first.has_next
    assert last.page == 3 and last.items == [18, 19]
    assert last.total_pages == 3 and last.total_items == 20
    assert last.has_previous and not last.has_next


def test_paginate_empty_and_invalid_size() -> None:
    empty = paginate([], page=4)

    assert (empty.page, empty.total_pages, empty.items) == (1, 1, [])
    with pytest.raises(ValueError):
        paginate([1], page_size=0)


def test_category_helpers() -> None:
    assert categories(CATALOGUE) == ["Food", "Sightseeing", "Water Sports"]
    assert top_categories(CATALOGUE, limit=1) == [("Food", 2)]


def test_featured_orders_by_rating() -> None:
    assert [a.id for a in featured(CATALOGUE, limit=2)] == ["a", "b"]


def test_trending_counts_recent_seats_only() -> None:
    bookings = [
        normalize_booking({"activityId": "d", "quantity": 3, "date": NOW - timedelta(days=2)}),
        normalize_booking({"activityId": "c", "quantity": 1, "date": NOW - timedelta(days=5)}),
        normalize_booking({"activityId": "b", "quantity": 9, "date": NOW - timedelta(days=45)}),
        normalize_booking({"quantity": 4, "date": NOW}),
    ]

    ranked = trending(CATALOGUE, bookings, now=NOW, limit=3)

    assert [a.id for a in ranked] == ["d", "c", "a"]


def test_bookings_by_day_and_totals() -> None:
    bookings = [
        normalize_booking({"id": "1", "amount": 100, "date": "2026-03-15T08:00:00Z"}),
        normalize_booking({"id": "2", "amount": 250, "date": "2026-03-16T12:00:00Z"}),
        normalize_booking({"id": "3", "amount": 50, "date": "2026-03-15T22:00:00Z"}),
    ]
    payouts = [normalize_payout({"amount": 2000}), normalize_payout({"amount": "750.5"})]

    grouped = bookings_by_day(bookings)

    assert [b.id for b in grouped[date(2026, 3, 15)]] == ["1", "3"]
    assert [b.id for b in grouped[date(2026, 3, 16)]] == ["2"]
    assert total_revenue(bookings) == 400
    assert total_payout(payouts) == 2750.5
