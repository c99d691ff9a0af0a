"""
modules/purchase/service.py

Run the purchase-order payment status refresh off the UI thread and report
back through duck-typed callbacks.

Public interface
----------------
- PaymentStatusRefreshJob.run_async(order_ids, callbacks) -> None

Where callbacks is any object (or simple namespace) that exposes:
- finished(success: bool, message: str, statuses: dict[str, bool])

The list view may be closed before the worker finishes; a callback that
raises at that point is logged and dropped. The cache has already merged
and persisted its result by then.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Slot

from ...utils.loggers import get_logger, log_event
from .api_client import PaymentStatusUnavailable
from .payment_status import PaymentStatusCache

_log = logging.getLogger(__name__)


def _safe_call(fn: Optional[Callable], *args, **kwargs) -> None:
    """Call a callback if present; a failing UI callback never kills the worker."""
    if fn is None:
        return
    try:
        fn(*args, **kwargs)
    except Exception:
        _log.exception("Payment status callback failed")


@dataclass
class _Callbacks:
    finished: Optional[Callable[[bool, str, dict], None]] = None


class _JobRunnable(QRunnable):
    """Thin QRunnable wrapper that executes a callable."""

    def __init__(self, work: Callable[[], None]) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._work = work

    @Slot()
    def run(self) -> None:  # type: ignore[override]
        self._work()


class PaymentStatusRefreshJob(QObject):
    def __init__(
        self,
        cache: PaymentStatusCache,
        pool: Optional[QThreadPool] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self._cache = cache
        self._pool = pool or QThreadPool.globalInstance()
        self._log = logger or get_logger("pharmacy_pos.payment_status")

    def run_async(self, order_ids: Iterable[Any], callbacks) -> None:
        cb = _Callbacks(finished=getattr(callbacks, "finished", None))
        ids: List[Any] = list(order_ids or ())
        self._pool.start(_JobRunnable(lambda: self._run(ids, cb)))

    # ---- runs in worker thread ----
    def _run(self, order_ids: List[Any], cb: _Callbacks) -> None:
        log_event(self._log, "payment_status", "start", "Refreshing", {"orders": len(order_ids)})
        try:
            statuses = self._cache.get_statuses(order_ids)
        except PaymentStatusUnavailable as e:
            log_event(self._log, "payment_status", "error", str(e), level=logging.WARNING)
            _safe_call(cb.finished, False, str(e), self._cache.statuses)
            return
        except Exception as e:
            _log.exception("Payment status refresh failed")
            _safe_call(cb.finished, False, f"Payment status refresh failed.\n\n{e.__class__.__name__}: {e}", {})
            return
        log_event(self._log, "payment_status", "done", "Refreshed", {"orders": len(statuses)})
        _safe_call(cb.finished, True, "", statuses)
