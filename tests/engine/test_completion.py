from __future__ import annotations

import queue
import time
from threading import Thread

import pytest

from lexicon_crawler.engine import ClosableQueue, CompletionDetector, DetectorState


def test_detector_closes_after_quiet_interval() -> None:
    outputs: ClosableQueue[str] = ClosableQueue()
    detector = CompletionDetector(quiet_interval=0.1)
    started = time.monotonic()
    assert list(detector.watch(outputs)) == []
    assert time.monotonic() - started >= 0.1
    assert detector.state is DetectorState.CLOSED
    assert detector.fired
    assert outputs.closed
    assert outputs.put("late") is False


def test_steady_arrival_keeps_detector_active() -> None:
    outputs: ClosableQueue[int] = ClosableQueue()
    detector = CompletionDetector(quiet_interval=0.5)

    def produce() -> None:
        for value in range(8):
            time.sleep(0.1)
            outputs.put(value)

    producer = Thread(target=produce)
    producer.start()
    started = time.monotonic()
    received = list(detector.watch(outputs))
    elapsed = time.monotonic() - started
    producer.join()

    # total run (~0.8s) is longer than the quiet interval, yet nothing was lost
    assert received == list(range(8))
    assert elapsed >= 0.8 + 0.5 - 0.05
    assert detector.emissions == 8
    assert detector.fired


def test_single_item_rearms_before_firing() -> None:
    outputs: ClosableQueue[object] = ClosableQueue()
    marker = object()
    outputs.put(marker)
    detector = CompletionDetector(quiet_interval=0.05)
    assert list(detector.watch(outputs)) == [marker]
    assert detector.emissions == 1


def test_explicit_close_ends_watch_without_firing() -> None:
    outputs: ClosableQueue[int] = ClosableQueue()
    outputs.put(1)
    outputs.close()
    detector = CompletionDetector(quiet_interval=10)
    assert list(detector.watch(outputs)) == [1]
    assert detector.closed
    assert not detector.fired


def test_closed_detector_rejects_emissions() -> None:
    detector = CompletionDetector(quiet_interval=1)
    detector.close()
    with pytest.raises(RuntimeError):
        detector.record_emission()


def test_deadline_follows_last_emission() -> None:
    now = [100.0]
    detector = CompletionDetector(quiet_interval=5, clock=lambda: now[0])
    now[0] = 103.0
    detector.record_emission()
    now[0] = 107.0
    assert not detector.expired()
    assert detector.remaining() == pytest.approx(1.0)
    now[0] = 108.0
    assert detector.expired()
    assert detector.last_emission == 103.0


def test_quiet_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        CompletionDetector(quiet_interval=0)


class LatePutQueue(ClosableQueue):
    """Accept one record in the window between a read timeout and the close."""

    def __init__(self) -> None:
        super().__init__("outputs")
        self.late_accepted = False

    def get(self, timeout=None):
        try:
            return super().get(timeout=timeout)
        except queue.Empty:
            if not self.late_accepted:
                self.late_accepted = self.put("late-record")
            raise


def test_record_accepted_just_before_close_is_still_delivered() -> None:
    outputs = LatePutQueue()
    detector = CompletionDetector(quiet_interval=0.05)

    assert list(detector.watch(outputs)) == ["late-record"]
    assert outputs.late_accepted
    assert detector.emissions == 1
    assert detector.fired
    assert detector.closed
