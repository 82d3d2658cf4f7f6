"""CSV exporter writing one line per accepted headword."""

from __future__ import annotations

import csv
from pathlib import Path

from ..parser import Attribute, WordRecord
from .base import BaseExporter, ExporterSetupError

# Column order follows Attribute declaration order; WordRecord.flags uses the same order.
CSV_HEADER: tuple[str, ...] = ("word",) + tuple(attribute.value for attribute in Attribute)


class CsvExporter(BaseExporter):
    """Buffered CSV writer flushed every ``flush_every`` records and on close."""

    def __init__(self, path: Path, flush_every: int = 300) -> None:
        if flush_every < 1:
            raise ValueError("flush_every must be >= 1")
        self.path = path
        self.flush_every = flush_every
        self.written = 0
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = self.path.open("w", encoding="utf-8", newline="")
        except OSError as exc:
            raise ExporterSetupError(f"Cannot create output file {self.path}: {exc}") from exc
        self._writer = csv.writer(self._file, lineterminator="\n")
        self._writer.writerow(CSV_HEADER)

    def export(self, record: WordRecord) -> None:
        self._writer.writerow((record.key, *record.flags()))
        self.written += 1
        if self.written % self.flush_every == 0:
            self.flush()

    def flush(self) -> None:
        if not self._file.closed:
            self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.flush()
            self._file.close()


__all__ = ["CSV_HEADER", "CsvExporter"]
