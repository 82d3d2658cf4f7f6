"""Quiet-interval completion detection for a crawl with no known total."""

from __future__ import annotations

import queue
import time
from enum import Enum
from typing import Callable, Iterator, TypeVar

import structlog

from .queues import ClosableQueue, QueueClosed

T = TypeVar("T")


class DetectorState(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class CompletionDetector:
    """Close the output queue once nothing has been emitted for ``quiet_interval`` seconds.

    The deadline is rearmed and checked only from the consumer loop in
    ``watch``, which reads the same queue the records travel through, so a
    rearm can never be observed after the fire it should have prevented.
    """

    def __init__(
        self,
        quiet_interval: float,
        clock: Callable[[], float] = time.monotonic,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if quiet_interval <= 0:
            raise ValueError("quiet_interval must be > 0")
        self.quiet_interval = quiet_interval
        self.clock = clock
        self.logger = logger or structlog.get_logger("lexicon_crawler.completion")
        self.state = DetectorState.ACTIVE
        self.emissions = 0
        self.fired = False
        self._deadline = clock() + quiet_interval
        self.last_emission: float | None = None

    @property
    def closed(self) -> bool:
        return self.state is DetectorState.CLOSED

    def arm(self) -> None:
        self._ensure_active()
        self._deadline = self.clock() + self.quiet_interval

    def record_emission(self) -> None:
        self._ensure_active()
        now = self.clock()
        self.emissions += 1
        self.last_emission = now
        self._deadline = now + self.quiet_interval

    def remaining(self) -> float:
        return max(0.0, self._deadline - self.clock())

    def expired(self) -> bool:
        return self.clock() >= self._deadline

    def close(self) -> None:
        self.state = DetectorState.CLOSED

    def watch(self, outputs: ClosableQueue[T]) -> Iterator[T]:
        """Yield items from ``outputs`` until the quiet interval elapses or the queue closes."""

        self.arm()
        while True:
            try:
                item = outputs.get(timeout=self.remaining())
            except queue.Empty:
                if not self.expired():
                    continue
                self.logger.info(
                    "quiet_interval_elapsed",
                    quiet_interval=self.quiet_interval,
                    emissions=self.emissions,
                )
                self.fired = True
                outputs.close()
                # a put accepted before the close is still delivered
                for item in outputs:
                    self.record_emission()
                    yield item
                self.close()
                return
            except QueueClosed:
                self.close()
                return
            self.record_emission()
            yield item

    def _ensure_active(self) -> None:
        if self.closed:
            raise RuntimeError("CompletionDetector is closed; no further records may be emitted")


__all__ = ["CompletionDetector", "DetectorState"]
