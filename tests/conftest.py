# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Qt runs headless on the offscreen platform
# - No network: the payment status service is always a fake
# - Cache storage is an in-memory KeyValueStore unless a test asks for SQLite
# - Silence benign Qt signal warnings
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import re

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6 import QtCore

from pharmacy_pos.database.kv_store import MemoryKeyValueStore


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):  # alias to match code that expects an `app` fixture
    return qapp


# ---------- Silence benign Qt warnings ----------
_BENIGN_QT_PATTERNS = [
    r"^QObject::connect: .* already connected",
    r"^QObject::disconnect: Unexpected null parameter",
    r"^QBasicTimer::stop: Failed\. Platform timer not running\.",
    r"^This plugin does not support propagateSizeHints",
]

@pytest.fixture(autouse=True, scope="session")
def _silence_benign_qt():
    """Filter common harmless Qt messages during tests."""
    original = QtCore.qInstallMessageHandler(None)
    rx = [re.compile(p) for p in _BENIGN_QT_PATTERNS]

    def handler(msg_type, context, message):
        text = str(message)
        for r in rx:
            if r.search(text):
                return  # swallow benign messages
        # pass everything else through the default handler
        QtCore.qInstallMessageHandler(None)
        try:
            QtCore.qDebug(message)
        finally:
            QtCore.qInstallMessageHandler(handler)

    QtCore.qInstallMessageHandler(handler)
    try:
        yield
    finally:
        QtCore.qInstallMessageHandler(original)


# ---------- Payment status fakes ----------
class FakeClock:
    """Milliseconds since epoch, moved by hand."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance_minutes(self, minutes: float) -> None:
        self.now += int(minutes * 60 * 1000)


class FakeFetcher:
    """Records every batch it is asked for; answers from a fixed paid set."""

    def __init__(self, paid=()):
        self.paid = set(paid)
        self.calls: list[list[str]] = []
        self.error: Exception | None = None

    def __call__(self, ids):
        self.calls.append(list(ids))
        if self.error is not None:
            raise self.error
        return {i: (i in self.paid) for i in ids}


@pytest.fixture()
def store():
    return MemoryKeyValueStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def fetcher():
    return FakeFetcher(paid={"po-1", "po-3"})
