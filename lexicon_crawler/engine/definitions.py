"""Concurrent entry-page fetching feeding the output queue."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock

import structlog
from selectolax.parser import Node

from .collector import Collector, Page
from .parser import Outcome, Parser, UnresolvedRecord
from .queues import ClosableQueue
from .thread_pool import DispatchPool


@dataclass
class DispatchSummary:
    dispatched: int = 0
    emitted: int = 0
    dropped: int = 0


class DefinitionFetcher:
    """Fetch entry pages on a dispatch pool and emit one outcome per article."""

    def __init__(
        self,
        collector: Collector,
        parser: Parser,
        pool: DispatchPool,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.collector = collector
        self.parser = parser
        self.pool = pool
        self.logger = logger or structlog.get_logger("lexicon_crawler.definitions")
        self.summary = DispatchSummary()
        self._outputs: ClosableQueue[Outcome] | None = None
        self._lock = Lock()
        collector.on_html(parser.selectors.article, self._on_article)

    def run(self, links: ClosableQueue[str], outputs: ClosableQueue[Outcome]) -> DispatchSummary:
        """Dispatch a fetch for every link until the link queue is closed."""

        self._outputs = outputs
        for link in links:
            if outputs.closed:
                break
            if self.fetch(link):
                self.summary.dispatched += 1
        return self.summary

    def fetch(self, link: str) -> bool:
        if self.collector.has_visited(link):
            return False
        return self.collector.dispatch(self.pool, link)

    def _on_article(self, article: Node, page: Page) -> None:
        outcome = self.parser.parse_article(article, page.url)
        if isinstance(outcome, UnresolvedRecord):
            self.logger.debug("headword_missing", url=page.url)
        self.emit(outcome)

    def emit(self, outcome: Outcome) -> bool:
        accepted = self._outputs is not None and self._outputs.put(outcome)
        with self._lock:
            if accepted:
                self.summary.emitted += 1
            else:
                self.summary.dropped += 1
        if not accepted:
            self.logger.debug("outcome_dropped_after_close", url=getattr(outcome, "url", None))
        return accepted


__all__ = ["DefinitionFetcher", "DispatchSummary"]
