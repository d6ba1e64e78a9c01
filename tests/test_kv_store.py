import sqlite3

import pytest

from db.kv_store import MemoryStore, SQLiteStore, StoreError


@pytest.fixture(params=["sqlite", "memory"])
def any_store(request, store):
    if request.param == "memory":
        return MemoryStore()
    return store


def test_get_returns_none_for_missing_key(any_store):
    assert any_store.get("subjects:nope") is None


def test_set_overwrites_unconditionally(any_store):
    any_store.set("subjects:a", {"id": "a", "name": "Old"})
    any_store.set("subjects:a", {"id": "a", "name": "New"})
    assert any_store.get("subjects:a") == {"id": "a", "name": "New"}


def test_delete_is_idempotent(any_store):
    any_store.set("subjects:a", {"id": "a"})
    any_store.delete("subjects:a")
    any_store.delete("subjects:a")
    assert any_store.get("subjects:a") is None


def test_scan_by_prefix_only_matches_exact_prefix(any_store):
    any_store.set("weeks:s1:w1", {"id": "w1"})
    any_store.set("weeks:s1:w2", {"id": "w2"})
    any_store.set("weeks:s10:w3", {"id": "w3"})
    any_store.set("WEEKS:s1:w4", {"id": "w4"})

    found = sorted(item["id"] for item in any_store.scan_by_prefix("weeks:s1:"))
    assert found == ["w1", "w2"]


def test_scan_treats_like_wildcards_literally(any_store):
    any_store.set("progress:a_b:w1", {"id": 1})
    any_store.set("progress:axb:w1", {"id": 2})
    assert [item["id"] for item in any_store.scan_by_prefix("progress:a_b:")] == [1]


def test_memory_store_returns_copies():
    store = MemoryStore()
    value = {"links": ["http://a"]}
    store.set("k", value)
    value["links"].append("http://b")
    fetched = store.get("k")
    fetched["links"].append("http://c")
    assert store.get("k") == {"links": ["http://a"]}


def test_sqlite_store_wraps_driver_errors(tmp_path):
    conn = sqlite3.connect(tmp_path / "empty.db")
    try:
        with pytest.raises(StoreError):
            SQLiteStore(conn).get("anything")
    finally:
        conn.close()


def test_memory_store_clear_drops_everything():
    store = MemoryStore()
    store.set("subjects:a", {"id": "a"})
    store.set("weeks:a:w1", {"id": "w1"})
    store.clear()
    assert store.get("subjects:a") is None
    assert store.scan_by_prefix("") == []
