# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Closable multi-producer/multi-consumer queue used for fan-out and fan-in."""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")

_CLOSED = object()


class ClosableQueue(Generic[T]):
    """
    Unbounded FIFO that consumers iterate until it is closed and drained.

    ``close()`` enqueues a single end marker. A consumer that takes the marker
    puts it back before stopping, so every consumer sees it exactly when the
    items in front of it are gone.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[object] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: T) -> bool:
        """Enqueue an item. Returns False, without enqueuing, once the queue is closed."""
        with self._lock:
            if self._closed:
                return False
            self._queue.put(item)
            return True

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def discard_pending(self) -> int:
        """Close the queue and drop every item no consumer has taken yet."""
        with self._lock:
            dropped = 0
            while True:
                try:
                    item = self._queue.get_nowait()
                except queue.Empty:
                    break
                if item is not _CLOSED:
                    dropped += 1
            self._closed = True
            self._queue.put(_CLOSED)
            return dropped

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                self._queue.put(_CLOSED)
                return
            yield item  # type: ignore[misc]


__all__ = ["ClosableQueue"]
