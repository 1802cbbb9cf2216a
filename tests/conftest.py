import os
import threading
from datetime import datetime

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from recprefs.device import Rotation, StaticDevice  # noqa: E402
from recprefs.logger import setup_logging  # noqa: E402
from recprefs.preferences import RecorderPreferences  # noqa: E402

FIXED_NOW = datetime(2026, 10, 18, 15, 4, 5, 123000)


class FakeStore:
    """In-memory store that calls listeners directly and counts (un)registrations."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.listeners = {}
        self.registered = 0
        self.unregistered = 0
        self._next = 0
        self._lock = threading.Lock()

    def get_raw(self, key):
        with self._lock:
            return self.data.get(key)

    def set_raw(self, key, value):
        with self._lock:
            if value is None:
                self.data.pop(key, None)
            else:
                self.data[key] = value
            callbacks = list(self.listeners.values())
        for cb in callbacks:
            cb(key)

    def on_change(self, callback):
        with self._lock:
            self._next += 1
            self.listeners[self._next] = callback
            self.registered += 1
            return self._next

    def off_change(self, handle):
        with self._lock:
            if self.listeners.pop(handle, None) is not None:
                self.unregistered += 1


@pytest.fixture(scope="session", autouse=True)
def setup_app_logging():
    setup_logging()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def device():
    # portrait phone
    return StaticDevice(width=1080, height=1920, current_rotation=Rotation.ROTATION_0, version=29)


@pytest.fixture
def prefs(store, device):
    return RecorderPreferences(store, device, clock=lambda: FIXED_NOW)
