from __future__ import annotations

import random

from activity_store.domain.identity import dedupe, identity_key, signature
from activity_store.domain.normalize import normalize_activity

SAMPLE_SIZE = 200
ID_POOL = 15


def test_identity_key_prefers_id() -> None:
    assert identity_key({"id": "ex_1", "name": "Walk", "price": 10}) == "ex_1"
    assert identity_key(normalize_activity({"id": "ex_2"})) == "ex_2"


def test_identity_key_falls_back_to_name_and_price() -> None:
    assert identity_key({"name": "Walk", "price": 1200}) == "Walk|1200"
    assert identity_key({"id": None, "name": "Walk", "price": 1200.0}) == "Walk|1200"
    assert identity_key({"name": "Walk", "price": 12.5}) == "Walk|12.5"


def test_signature_ignores_id() -> None:
    a = normalize_activity({"id": "a", "name": "Walk", "price": "1200"})
    b = {"id": "b", "name": "Walk", "price": 1200}

    assert signature(a) == signature(b)
    assert identity_key(a) != identity_key(b)


def test_dedupe_keeps_first_occurrence_in_order() -> None:
    items = [
        {"id": "1", "name": "first"},
        {"name": "Walk", "price": 5},
        {"id": "1", "name": "second"},
        {"id": "2"},
        {"name": "Walk", "price": 5.0},
    ]

    result = dedupe(items)

    assert result == [items[0], items[1], items[3]]


def test_dedupe_mixes_models_and_mappings() -> None:
    model = normalize_activity({"id": "ex_1", "name": "Walk"})

    assert dedupe([model, {"id": "ex_1"}]) == [model]


def test_dedupe_yields_unique_keys_and_preserves_first_seen_order() -> None:
    rng = random.Random(1234)
    items = [{"id": f"id-{rng.randrange(ID_POOL)}", "n": i} for i in range(SAMPLE_SIZE)]

    result = dedupe(items)
    keys = [identity_key(r) for r in result]

    assert len(keys) == len(set(keys))
    first_seen: dict[str, int] = {}
    for position, item in enumerate(items):
        first_seen.setdefault(identity_key(item), position)
    assert [r["n"] for r in result] == sorted(first_seen.values())


def test_dedupe_of_empty_list() -> None:
    assert dedupe([]) == []
