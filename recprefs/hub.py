# recprefs/hub.py
from __future__ import annotations
import logging
import threading
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

from .store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription(Generic[T]):
    """Handle returned by :meth:`PreferenceStream.subscribe`."""

    def __init__(self, stream: "PreferenceStream[T]", callback: Callable[[T], None]):
        self._stream = stream
        self.callback = callback
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def cancel(self):
        """Stop delivery. Safe to call more than once, and from inside the callback."""
        self._stream._cancel(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.cancel()


class PreferenceStream(Generic[T]):
    """Live snapshots of a value derived from the store.

    A single store listener is registered while at least one subscriber is
    active. Each subscriber gets the current snapshot on subscribe and a
    freshly computed one after every relevant store change. When ``keys``
    is given only changes to those store keys trigger a recompute.
    """

    def __init__(self, store: KeyValueStore, compute: Callable[[], T],
                 keys: Optional[Iterable[str]] = None, name: str = "stream"):
        self._store = store
        self._compute = compute
        self._keys = frozenset(keys) if keys is not None else None
        self.name = name
        self._lock = threading.RLock()
        self._subs: List[Subscription[T]] = []
        self._handle: Any = None

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subs)

    @property
    def listening(self) -> bool:
        with self._lock:
            return self._handle is not None

    def subscribe(self, callback: Callable[[T], None]) -> Subscription[T]:
        sub = Subscription(self, callback)
        with self._lock:
            if self._handle is None:
                self._handle = self._store.on_change(self._on_store_change)
                logger.debug(f"[{self.name}] listener registered")
            self._subs.append(sub)
            ok, snapshot = self._snapshot()
            if ok:
                self._deliver(sub, snapshot)
        return sub

    def _cancel(self, sub: Subscription[T]):
        with self._lock:
            if sub._closed:
                return
            sub._closed = True
            self._subs.remove(sub)
            if not self._subs and self._handle is not None:
                handle, self._handle = self._handle, None
                self._store.off_change(handle)
                logger.debug(f"[{self.name}] listener unregistered")

    def _on_store_change(self, key: str):
        if self._keys is not None and key not in self._keys:
            return
        with self._lock:
            if not self._subs:
                return
            ok, snapshot = self._snapshot()
            if not ok:
                return
            for sub in list(self._subs):
                if not sub._closed:
                    self._deliver(sub, snapshot)

    def _snapshot(self) -> Tuple[bool, Optional[T]]:
        try:
            return True, self._compute()
        except Exception:
            logger.exception(f"[{self.name}] snapshot failed, emission skipped")
            return False, None

    def _deliver(self, sub: Subscription[T], snapshot: T):
        try:
            sub.callback(snapshot)
        except Exception:
            logger.exception(f"[{self.name}] subscriber raised")
