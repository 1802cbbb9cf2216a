# recprefs/store.py
from __future__ import annotations
import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Protocol, Union

from PyQt5.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)

RawValue = Union[bool, str, None]
ChangeCallback = Callable[[str], None]


class KeyValueStore(Protocol):
    """What the preference facade needs from a backing store."""

    def get_raw(self, key: str) -> RawValue: ...

    def set_raw(self, key: str, value: RawValue) -> None: ...

    def on_change(self, callback: ChangeCallback) -> Any: ...

    def off_change(self, handle: Any) -> None: ...


class PreferenceStore(QObject):
    """Untyped key-value store persisted as a JSON document.

    Values are ``bool``, ``str`` or absent. Writing ``None`` removes the key.
    Every write is saved immediately (when a path is given), then passed to
    the ``on_change`` listeners on the writing thread, one write at a time,
    and finally announced through ``changed`` for Qt consumers.
    """

    changed = pyqtSignal(str)

    def __init__(self, path: Path | None = None, parent=None):
        super().__init__(parent)
        self.path = Path(path) if path is not None else None
        self.data: Dict[str, RawValue] = {}
        self._lock = threading.RLock()
        self._listeners: Dict[int, ChangeCallback] = {}
        self._next_handle = 0
        self._notify_lock = threading.RLock()
        self.load()

    def load(self):
        with self._lock:
            self.data = {}
            if self.path is None or not self.path.exists():
                return
            try:
                loaded = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Could not read preferences from {self.path}: {e}")
                return
            if not isinstance(loaded, dict):
                logger.warning(f"Ignoring preferences file {self.path}: not a JSON object")
                return
            self.data = {k: v for k, v in loaded.items() if isinstance(v, (bool, str))}

    def save(self):
        if self.path is None:
            return
        with self._lock:
            text = json.dumps(self.data, ensure_ascii=False, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def get_raw(self, key: str) -> RawValue:
        with self._lock:
            return self.data.get(key)

    def set_raw(self, key: str, value: RawValue):
        if value is not None and not isinstance(value, (bool, str)):
            raise TypeError(f"Unsupported preference value for {key}: {type(value).__name__}")
        with self._lock:
            if value is None:
                self.data.pop(key, None)
            else:
                self.data[key] = value
            self.save()
            listeners = list(self._listeners.values())
        with self._notify_lock:
            for cb in listeners:
                try:
                    cb(key)
                except Exception:
                    logger.exception(f"Preference listener failed for {key}")
        self.changed.emit(key)

    def on_change(self, callback: ChangeCallback) -> int:
        with self._lock:
            self._next_handle += 1
            self._listeners[self._next_handle] = callback
            return self._next_handle

    def off_change(self, handle: int):
        with self._lock:
            self._listeners.pop(handle, None)

    def keys(self):
        with self._lock:
            return list(self.data)
