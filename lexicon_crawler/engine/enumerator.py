"""Walk the alphabetical index and feed entry links into the link queue."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable

import structlog

from .collector import Collector, Page
from .fetcher import FetchError
from .links import LinkExtractor, PageRole
from .queues import ClosableQueue


@dataclass
class EnumerationSummary:
    symbols: int = 0
    index_pages: int = 0
    failed_pages: int = 0
    links_emitted: int = 0
    links_rejected: int = 0


class IndexEnumerator:
    """Serially visit letter pages and their sub-index pages.

    The link queue is never closed here; whoever owns the pipeline decides
    when no more links can be accepted.
    """

    def __init__(
        self,
        collector: Collector,
        extractor: LinkExtractor,
        index_url: Callable[[str], str],
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.collector = collector
        self.extractor = extractor
        self.index_url = index_url
        self.logger = logger or structlog.get_logger("lexicon_crawler.enumerator")
        self._pending: deque[str] = deque()
        self._links: ClosableQueue[str] | None = None
        self.summary = EnumerationSummary()
        collector.on_page(self._on_index_page)

    def enumerate(self, alphabet: Iterable[str], links: ClosableQueue[str]) -> EnumerationSummary:
        self._links = links
        self.summary = EnumerationSummary()
        for symbol in alphabet:
            if links.closed:
                self.logger.info("enumeration_interrupted", symbol=symbol)
                break
            self.summary.symbols += 1
            before = self.summary.links_emitted
            self._walk(self.index_url(symbol))
            self.logger.info(
                "symbol_enumerated",
                symbol=symbol,
                links=self.summary.links_emitted - before,
            )
        return self.summary

    def _walk(self, start_url: str) -> None:
        self._pending.clear()
        self._pending.append(start_url)
        while self._pending:
            url = self._pending.popleft()
            try:
                if self.collector.visit(url):
                    self.summary.index_pages += 1
            except FetchError as exc:
                self.summary.failed_pages += 1
                self.logger.warning("index_fetch_failed", url=url, reason=exc.reason)

    def _on_index_page(self, page: Page) -> None:
        for link in self.extractor.extract(page, PageRole.INDEX_OF_INDICES):
            if not self.collector.has_visited(link) and link not in self._pending:
                self._pending.append(link)
        for link in self.extractor.extract(page, PageRole.INDEX_OF_ENTRIES):
            if self._links is not None and self._links.put(link):
                self.summary.links_emitted += 1
            else:
                self.summary.links_rejected += 1


__all__ = ["EnumerationSummary", "IndexEnumerator"]
