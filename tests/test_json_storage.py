from __future__ import annotations

import json
import threading

from srf_api.domain.collections import Collection
from srf_api.repositories.json_storage import JsonFileStore
from srf_api.repositories.memory_storage import MemoryStore


def test_ensure_ready_creates_directory_and_empty_files(tmp_path):
    store = JsonFileStore(tmp_path / "data")
    store.ensure_ready()
    for name in ("donations.json", "volunteerForms.json", "newsletter.json", "contactForms.json"):
        path = tmp_path / "data" / name
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == []


def test_ensure_ready_keeps_existing_content(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "donations.json").write_text('[{"email": "a@x.com"}]', encoding="utf-8")
    store = JsonFileStore(data_dir)
    store.ensure_ready()
    assert store.read_all(Collection.DONATIONS) == [{"email": "a@x.com"}]


def test_append_returns_new_length_and_keeps_order(tmp_path):
    store = JsonFileStore(tmp_path)
    assert store.append(Collection.CONTACT, {"n": 1}) == 1
    assert store.append(Collection.CONTACT, {"n": 2}) == 2
    assert [r["n"] for r in store.read_all(Collection.CONTACT)] == [1, 2]
    on_disk = json.loads((tmp_path / "contactForms.json").read_text(encoding="utf-8"))
    assert on_disk == [{"n": 1}, {"n": 2}]


def test_read_all_missing_file_is_empty(tmp_path):
    store = JsonFileStore(tmp_path / "nowhere")
    assert store.read_all(Collection.VOLUNTEER) == []
    assert store.count(Collection.VOLUNTEER) == 0


def test_read_all_corrupted_or_blank_file_is_empty(tmp_path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "donations.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "contactForms.json").write_text("   \n", encoding="utf-8")
    (tmp_path / "volunteerForms.json").write_text('{"a": 1}', encoding="utf-8")
    assert store.read_all(Collection.DONATIONS) == []
    assert store.read_all(Collection.CONTACT) == []
    assert store.read_all(Collection.VOLUNTEER) == []


def test_append_over_corrupted_file_starts_fresh(tmp_path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "donations.json").write_text("garbage", encoding="utf-8")
    assert store.append(Collection.DONATIONS, {"email": "a@x.com"}) == 1
    assert store.read_all(Collection.DONATIONS) == [{"email": "a@x.com"}]


def test_subscribe_is_case_insensitive_and_handles_legacy_strings(tmp_path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "newsletter.json").write_text('["Old@Example.com"]', encoding="utf-8")
    assert store.subscribe("old@example.COM", "2024-01-01T00:00:00.000Z") is False
    assert store.subscribe("  A@X.com ", "2024-01-01T00:00:00.000Z") is True
    assert store.subscribe("a@x.com", "2024-01-02T00:00:00.000Z") is False
    entries = store.read_all(Collection.NEWSLETTER)
    assert entries == ["Old@Example.com", {"email": "A@X.com", "date": "2024-01-01T00:00:00.000Z"}]


def test_concurrent_appends_lose_nothing(tmp_path):
    store = JsonFileStore(tmp_path)
    per_thread = 10

    def worker(tid: int) -> None:
        for i in range(per_thread):
            store.append(Collection.DONATIONS, {"t": tid, "i": i})

    threads = [threading.Thread(target=worker, args=(t,)) for t in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    records = store.read_all(Collection.DONATIONS)
    assert len(records) == 16 * per_thread
    assert len({(r["t"], r["i"]) for r in records}) == 16 * per_thread


def test_memory_store_matches_file_store_contract():
    store = MemoryStore({"contact": [{"email": "c@x.com"}]})
    assert store.count(Collection.CONTACT) == 1
    assert store.append(Collection.CONTACT, {"email": "d@x.com"}) == 2
    snapshot = store.read_all(Collection.CONTACT)
    snapshot.append({"email": "mutated"})
    assert store.count(Collection.CONTACT) == 2
    assert store.subscribe("N@x.com", "d") is True
    assert store.subscribe("n@X.com", "d") is False
