"""Unbounded FIFO queues that consumers can observe being closed."""

from __future__ import annotations

import queue
from threading import Lock
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

_CLOSED = object()


class QueueClosed(Exception):
    """Raised by ``get`` once the queue is closed and drained."""


class ClosableQueue(Generic[T]):
    """Thread-safe FIFO queue with an explicit end-of-stream."""

    def __init__(self, name: str = "queue") -> None:
        self.name = name
        self._queue: queue.Queue = queue.Queue()
        self._lock = Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: T) -> bool:
        """Enqueue ``item``; returns False if the queue was already closed."""

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

    def get(self, timeout: float | None = None) -> T:
        """Block for the next item.

        Raises ``queue.Empty`` when ``timeout`` elapses and ``QueueClosed``
        once the close marker is reached.
        """

        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # keep the marker for any other consumer
            self._queue.put(_CLOSED)
            raise QueueClosed(self.name)
        return item

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except QueueClosed:
                return


__all__ = ["ClosableQueue", "QueueClosed"]
