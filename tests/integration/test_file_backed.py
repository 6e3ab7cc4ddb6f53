"""
End-to-end checks against the directory-backed store.

No external services are needed; every test works in its own tmp directory.
"""

from __future__ import annotations

import json
import random
import threading
from pathlib import Path

from activity_store.events import BOOKINGS_CHANGED
from activity_store.infrastructure.persistence import FileKeyValueStore
from activity_store.service import ActivityService

WORKERS = 4
BOOKINGS_PER_WORKER = 25


def _service(directory: Path, seed: int = 0) -> ActivityService:
    return ActivityService(FileKeyValueStore(directory, backoff_seconds=0), rng=random.Random(seed))


def test_data_survives_restart(tmp_path: Path) -> None:
    first = _service(tmp_path)
    added = first.add_activity({"name": "Backwater Houseboat", "category": "Stay", "price": 6500, "rating": 4.8})
    booking = first.add_booking({"activityId": added.id, "quantity": 2, "amount": 13000})
    first.seed_sample_bookings_and_payouts(bookings=0, payouts=2)

    restarted = _service(tmp_path, seed=1)

    assert restarted.get_activity(added.id) == added
    assert [b.id for b in restarted.get_bookings()] == [booking.id]
    assert restarted.bookings.activity_for(restarted.get_bookings()[0]) == added
    assert len(restarted.get_payouts()) == 2


def test_on_disk_format_is_camel_case_json(tmp_path: Path) -> None:
    service = _service(tmp_path)
    service.add_booking({"activity_id": "ex_1", "customer_name": "K. Singh", "date": "2026-01-02"})

    (stored,) = json.loads((tmp_path / "lap_bookings.json").read_text(encoding="utf-8"))

    assert set(stored) == {"id", "activityId", "activityName", "customerName", "quantity", "amount", "date"}
    assert stored["date"] == "2026-01-02T00:00:00.000Z"


def test_malformed_activities_file_is_reseeded(tmp_path: Path) -> None:
    tmp_path.joinpath("lap_activities.json").write_text("[{oops", encoding="utf-8")

    activities = _service(tmp_path).get_activities()

    assert [a.id for a in activities] == ["ex_1", "ex_2", "ex_3"]
    assert json.loads(tmp_path.joinpath("lap_activities.json").read_text(encoding="utf-8"))[0]["id"] == "ex_1"


def test_reset_removes_files_and_reseeds(tmp_path: Path) -> None:
    service = _service(tmp_path)
    service.seed_sample_bookings_and_payouts()

    service.reset()

    assert service.get_bookings() == []
    assert service.get_payouts() == []
    assert len(service.get_activities()) == 3


def test_concurrent_adds_through_one_service_are_not_lost(tmp_path: Path) -> None:
    service = _service(tmp_path)
    notified: list[int] = []
    service.bus.subscribe(BOOKINGS_CHANGED, lambda: notified.append(1))

    def worker(n: int) -> None:
        for i in range(BOOKINGS_PER_WORKER):
            service.add_booking({"id": f"w{n}-{i}", "customerName": f"worker {n}"})

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(WORKERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(service.get_bookings()) == WORKERS * BOOKINGS_PER_WORKER
    assert len(notified) == WORKERS * BOOKINGS_PER_WORKER
