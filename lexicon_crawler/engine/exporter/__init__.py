"""Exporter SPI and implementations."""

from .base import BaseExporter, ExporterSetupError
from .csv_exporter import CSV_HEADER, CsvExporter

__all__ = ["BaseExporter", "CSV_HEADER", "CsvExporter", "ExporterSetupError"]
