"""Pipeline driver wiring enumeration, fetching, completion detection, dedup and export."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from threading import Thread

import structlog

from .config import CrawlConfig
from .engine import (
    ClosableQueue,
    Collector,
    CompletionDetector,
    DefinitionFetcher,
    DispatchPool,
    EnumerationSummary,
    Fetcher,
    IndexEnumerator,
    LinkExtractor,
    Outcome,
    Parser,
    RecencyCache,
    UnresolvedRecord,
)
from .engine.exporter import BaseExporter, CsvExporter
from .logging_conf import component_logger
from .ui import ProgressReporter


class StopReason(str, Enum):
    QUIET_INTERVAL = "quiet_interval"
    RECORD_CAP = "record_cap"
    CLOSED = "closed"


@dataclass
class PipelineState:
    """Counters owned by the single consumer of the output queue."""

    accepted: int = 0
    missed: int = 0
    duplicates: int = 0
    stop_reason: StopReason | None = None


@dataclass
class CrawlSummary:
    accepted: int
    missed: int
    duplicates: int
    index_pages: int
    failed_index_pages: int
    links: int
    dispatched: int
    dropped: int
    elapsed: float
    output_path: Path
    stop_reason: str

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload["output_path"] = str(self.output_path)
        return payload


class Orchestrator:
    """Central coordinator for one crawl run."""

    def __init__(
        self,
        config: CrawlConfig,
        output_path: Path | None = None,
        fetcher: Fetcher | None = None,
        progress: ProgressReporter | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.output_path = output_path or config.output.path
        self.fetcher = fetcher
        self.progress = progress or ProgressReporter(enabled=False)
        self.logger = logger or component_logger("orchestrator")

    def run(self) -> CrawlSummary:
        started = time.perf_counter()
        # Fatal if the sink cannot be created: nothing has been dispatched yet.
        exporter = self._create_exporter()
        owns_fetcher = self.fetcher is None
        fetcher = self.fetcher or Fetcher(self.config.http, logger=component_logger("fetcher"))

        links: ClosableQueue[str] = ClosableQueue("links")
        outputs: ClosableQueue[Outcome] = ClosableQueue("outputs")
        pool = DispatchPool(self.config.fetch_workers, name="definitions")
        enumerator = IndexEnumerator(
            Collector(fetcher, logger=component_logger("index")),
            LinkExtractor(self.config.selectors, logger=component_logger("links")),
            self.config.index_url,
            logger=component_logger("enumerator"),
        )
        definitions = DefinitionFetcher(
            Collector(fetcher, logger=component_logger("definitions")),
            Parser(self.config.selectors),
            pool,
            logger=component_logger("definitions"),
        )
        detector = CompletionDetector(self.config.quiet_interval, logger=component_logger("completion"))

        def _enumerate() -> None:
            try:
                enumerator.enumerate(self.config.alphabet, links)
            except Exception as exc:  # noqa: BLE001
                self.logger.error("enumeration_failed", error=str(exc), exc_info=True)
            finally:
                # Enumeration is done; in-flight fetches keep writing to outputs.
                links.close()

        self.logger.info(
            "crawl_started",
            symbols="".join(self.config.alphabet),
            quiet_interval=self.config.quiet_interval,
            cache_capacity=self.config.cache_capacity,
            termination=self.config.termination.value,
            max_records=self.config.record_cap,
            fetch_workers=self.config.fetch_workers,
            output=str(self.output_path),
        )
        threads = [
            Thread(target=_enumerate, name="crawler-enumerator", daemon=True),
            Thread(target=definitions.run, args=(links, outputs), name="crawler-dispatcher", daemon=True),
        ]
        self.progress.start()
        try:
            for thread in threads:
                thread.start()
            state = self.consume(outputs, detector, exporter)
        finally:
            outputs.close()
            links.close()
            detector.close()
            pool.shutdown(wait=False)
            self.progress.close()
            exporter.close()
            if owns_fetcher:
                fetcher.close()

        elapsed = time.perf_counter() - started
        enumeration: EnumerationSummary = enumerator.summary
        summary = CrawlSummary(
            accepted=state.accepted,
            missed=state.missed,
            duplicates=state.duplicates,
            index_pages=enumeration.index_pages,
            failed_index_pages=enumeration.failed_pages,
            links=enumeration.links_emitted,
            dispatched=definitions.summary.dispatched,
            dropped=definitions.summary.dropped,
            elapsed=elapsed,
            output_path=self.output_path,
            stop_reason=(state.stop_reason or StopReason.CLOSED).value,
        )
        self.logger.info("crawl_finished", **summary.as_dict())
        return summary

    def consume(
        self,
        outputs: ClosableQueue[Outcome],
        detector: CompletionDetector,
        exporter: BaseExporter,
    ) -> PipelineState:
        """Drain outcomes until the detector closes the queue or the record cap is hit."""

        state = PipelineState()
        cache = RecencyCache(self.config.cache_capacity)
        cap = self.config.record_cap
        for outcome in detector.watch(outputs):
            if isinstance(outcome, UnresolvedRecord):
                state.missed += 1
                self.progress.advance(missed=True)
                continue
            if not cache.should_emit(outcome.key):
                state.duplicates += 1
                self.progress.advance(duplicate=True, key=outcome.key)
                continue
            exporter.export(outcome)
            self.logger.info("record_accepted", index=state.accepted, missed=state.missed, key=outcome.key)
            state.accepted += 1
            self.progress.advance(accepted=True, key=outcome.key)
            if cap is not None and state.accepted >= cap:
                state.stop_reason = StopReason.RECORD_CAP
                detector.close()
                outputs.close()
                break
        if state.stop_reason is None:
            state.stop_reason = StopReason.QUIET_INTERVAL if detector.fired else StopReason.CLOSED
        return state

    def _create_exporter(self) -> BaseExporter:
        return CsvExporter(self.output_path, flush_every=self.config.output.flush_every)


__all__ = ["CrawlSummary", "Orchestrator", "PipelineState", "StopReason"]
