"""Worker dispatch for concurrent page fetches."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from threading import Lock, Thread
from typing import Any, Callable


class DispatchPool:
    """Run callables concurrently, bounded by ``max_workers`` or one thread per call.

    ``max_workers=None`` starts a daemon thread for every submission, so the
    number of in-flight fetches is limited only by the number of links.
    """

    def __init__(self, max_workers: int | None = 16, name: str = "fetch") -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be >= 1 or None")
        self.max_workers = max_workers
        self.name = name
        self._executor: ThreadPoolExecutor | None = None
        if max_workers is not None:
            self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=f"crawler-{name}")
        self._lock = Lock()
        self._closed = False
        self._spawned = 0

    @property
    def bounded(self) -> bool:
        return self._executor is not None

    def submit(self, fn: Callable[..., Any], *args: Any) -> bool:
        """Schedule ``fn(*args)``; returns False once the pool is shut down."""

        with self._lock:
            if self._closed:
                return False
            if self._executor is not None:
                self._executor.submit(fn, *args)
                return True
            self._spawned += 1
            thread = Thread(target=fn, args=args, name=f"crawler-{self.name}-{self._spawned}", daemon=True)
        thread.start()
        return True

    def shutdown(self, wait: bool = False) -> None:
        with self._lock:
            self._closed = True
        if self._executor is not None:
            self._executor.shutdown(wait=wait, cancel_futures=not wait)


__all__ = ["DispatchPool"]
