"""
purchase/payment_status.py

Paid/unpaid badge for the purchase order list.

Every order id maps to {"status": bool, "timestamp": ms}. The whole map is
persisted as one JSON value under a single key of a KeyValueStore and is
always read and replaced wholesale. An entry younger than the TTL is used
as-is; older or missing entries are collected and looked up in one batched
request.

Public API
----------
- PaymentStatusCache(store, fetcher, ttl_ms=..., clock=..., storage_key=...)
    .refresh(order_ids) -> bool      False when another refresh is in flight
    .get_statuses(order_ids) -> dict  {id: bool}, unknown ids -> False
    .statuses                        last merged values (read-only copy)

`fetcher` is any callable ids -> {id: bool}; normally
PaymentStatusClient.fetch_statuses. Its exceptions propagate to the caller
and leave the persisted map untouched.
"""
from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from ...constants import PAYMENT_STATUS_CACHE_KEY, PAYMENT_STATUS_CACHE_TTL_MS
from ...database.kv_store import KeyValueStore
from ...utils.product_ref import resolve_product_id

__all__ = ["PaymentStatusCache", "now_ms"]

_log = logging.getLogger(__name__)

Fetcher = Callable[[List[str]], Dict[str, bool]]


def now_ms() -> int:
    return int(time.time() * 1000)


class PaymentStatusCache:
    def __init__(
        self,
        store: KeyValueStore,
        fetcher: Fetcher,
        *,
        ttl_ms: int = PAYMENT_STATUS_CACHE_TTL_MS,
        clock: Callable[[], int] = now_ms,
        storage_key: str = PAYMENT_STATUS_CACHE_KEY,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.ttl_ms = ttl_ms
        self.clock = clock
        self.storage_key = storage_key
        self._statuses: Dict[str, bool] = {}
        self._in_flight = threading.Lock()

    @property
    def statuses(self) -> Dict[str, bool]:
        return dict(self._statuses)

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight.locked()

    # ------------------------------ storage ------------------------------

    def _load(self) -> Dict[str, Any]:
        raw = self.store.get(self.storage_key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            _log.debug("Discarding unreadable payment status cache: %s", e)
            return {}
        if not isinstance(data, dict):
            _log.debug("Discarding payment status cache of type %s", type(data).__name__)
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.store.set(self.storage_key, json.dumps(data))

    def _is_fresh(self, entry: Any, now: int) -> bool:
        if not isinstance(entry, dict):
            return False
        ts = entry.get("timestamp")
        if isinstance(ts, bool) or not isinstance(ts, (int, float)):
            return False
        return now - ts <= self.ttl_ms

    # ------------------------------ public -------------------------------

    def refresh(self, order_ids: Iterable[Any]) -> bool:
        """
        Bring the given ids up to date, fetching only the stale/missing ones.

        Returns False without doing anything when a refresh is already
        running; the caller asks again once that one settles.
        """
        if not self._in_flight.acquire(blocking=False):
            _log.debug("Payment status refresh already in flight; skipping")
            return False
        try:
            ids = _unique_ids(order_ids)
            if not ids:
                return True
            now = self.clock()
            cache = self._load()

            stale: List[str] = []
            for oid in ids:
                entry = cache.get(oid)
                if self._is_fresh(entry, now):
                    self._statuses[oid] = bool(entry.get("status"))
                else:
                    stale.append(oid)

            if not stale:
                return True

            _log.info("Fetching payment status for %d purchase orders", len(stale))
            fetched = self.fetcher(stale) or {}
            for oid in stale:
                status = bool(fetched.get(oid, False))
                cache[oid] = {"status": status, "timestamp": now}
                self._statuses[oid] = status
            self._save(cache)
            return True
        finally:
            self._in_flight.release()

    def get_statuses(self, order_ids: Iterable[Any]) -> Dict[str, bool]:
        ids = _unique_ids(order_ids)
        persisted: Dict[str, bool] = {}
        if not self.refresh(ids):
            # another refresh holds the lock; fresh stored entries still count
            now = self.clock()
            cache = self._load()
            for oid in ids:
                entry = cache.get(oid)
                if self._is_fresh(entry, now):
                    persisted[oid] = bool(entry.get("status"))
        return {oid: persisted.get(oid, self._statuses.get(oid, False)) for oid in ids}

    def status_of(self, order_id: Any) -> Optional[bool]:
        """Last known status, None when this id has never been looked up."""
        oid = resolve_product_id(order_id)
        return self._statuses.get(oid) if oid is not None else None


def _unique_ids(order_ids: Iterable[Any]) -> List[str]:
    seen: Dict[str, None] = {}
    for raw in order_ids or ():
        oid = resolve_product_id(raw)
        if oid:
            seen.setdefault(oid, None)
    return list(seen)
