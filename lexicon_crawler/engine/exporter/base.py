"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..parser import WordRecord


class ExporterSetupError(RuntimeError):
    """The destination could not be prepared; the crawl cannot start."""


class BaseExporter(ABC):
    """Uniform exporter contract for accepted records."""

    @abstractmethod
    def export(self, record: WordRecord) -> None:
        """Persist a single record."""

    @abstractmethod
    def flush(self) -> None:
        """Flush buffered data to destination."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseExporter", "ExporterSetupError"]
