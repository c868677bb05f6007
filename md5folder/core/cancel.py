# md5folder/core/cancel.py
from __future__ import annotations

import threading
from typing import Callable, List, Optional


class CancellationSignal:
    """
    Broadcast, set-once cancellation flag shared by every pipeline task.

    Once cancel() has been called the signal stays raised. Callbacks registered
    with add_callback() run exactly once, on the thread that raised it (or
    immediately, if it was already raised).
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for cb in callbacks:
            cb()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until raised or timeout. Returns True if raised."""
        return self._event.wait(timeout)

    def add_callback(self, cb: Callable[[], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(cb)
                return
        cb()
