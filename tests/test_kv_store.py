# tests/test_kv_store.py

from __future__ import annotations

import sqlite3

from pharmacy_pos.constants import PAYMENT_STATUS_CACHE_KEY
from pharmacy_pos.database import get_connection
from pharmacy_pos.database.kv_store import MemoryKeyValueStore, SqliteKeyValueStore
from pharmacy_pos.modules.purchase.payment_status import PaymentStatusCache


def test_k1_sqlite_store_upserts(tmp_path):
    """K1. get/set on the app database; a second set replaces the value."""
    conn = get_connection(tmp_path / "pos.db")
    try:
        store = SqliteKeyValueStore(conn)
        assert store.get("missing") is None
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"
        assert conn.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0] == 1
    finally:
        conn.close()


def test_k2_sqlite_store_survives_reconnect(tmp_path, fetcher, clock):
    """K2. The payment status map written through SQLite is read back by a new connection."""
    db = tmp_path / "pos.db"
    conn = get_connection(db)
    PaymentStatusCache(SqliteKeyValueStore(conn), fetcher, clock=clock).get_statuses(["po-1"])
    conn.close()

    conn = sqlite3.connect(str(db))
    try:
        store = SqliteKeyValueStore(conn)
        assert '"po-1"' in store.get(PAYMENT_STATUS_CACHE_KEY)
        assert PaymentStatusCache(store, fetcher, clock=clock).get_statuses(["po-1"]) == {"po-1": True}
        assert len(fetcher.calls) == 1
    finally:
        conn.close()


def test_k3_memory_store_copies_initial_data():
    """K3. The in-memory store starts from a copy of the given mapping."""
    seed = {"a": "1"}
    store = MemoryKeyValueStore(seed)
    store.set("a", "2")
    assert store.get("a") == "2"
    assert seed == {"a": "1"}
