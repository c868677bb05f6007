# md5folder/core/channel.py
from __future__ import annotations

import queue
from typing import Generic, Iterator, TypeVar

from .cancel import CancellationSignal

T = TypeVar("T")

_CLOSED = object()


class ResultChannel(Generic[T]):
    """
    Single-slot handoff between many producers and one consumer.

    Producers call offer(), which keeps retrying until the consumer takes the
    item or the cancellation signal is raised. The consumer iterates the
    channel until close() has been delivered.
    """

    def __init__(self, *, poll_s: float = 0.05):
        if poll_s <= 0:
            raise ValueError("poll_s must be > 0")
        self._poll_s = float(poll_s)
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=1)

    def offer(self, item: T, cancel: CancellationSignal) -> bool:
        """Deliver `item` unless cancelled first. Returns True if delivered."""
        return self._put(item, cancel)

    def close(self, cancel: CancellationSignal) -> bool:
        """Mark end-of-stream. Must only be called once all offers returned."""
        return self._put(_CLOSED, cancel)

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]

    def _put(self, item: object, cancel: CancellationSignal) -> bool:
        while not cancel.cancelled:
            try:
                self._queue.put(item, timeout=self._poll_s)
                return True
            except queue.Full:
                continue
        return False
