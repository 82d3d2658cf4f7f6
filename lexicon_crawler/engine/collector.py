"""Visit pages and hand parsed documents to registered callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Callable
from urllib.parse import urljoin

import structlog
from selectolax.parser import HTMLParser, Node

from .fetcher import FetchError, Fetcher
from .thread_pool import DispatchPool


@dataclass(slots=True)
class Page:
    """A fetched document together with the URL it was served from."""

    url: str
    tree: HTMLParser

    def absolute(self, href: str) -> str:
        return urljoin(self.url, href.strip())


NodeCallback = Callable[[Node, Page], None]
PageCallback = Callable[[Page], None]


class Collector:
    """Fetch URLs once each and fire callbacks for matching elements."""

    def __init__(
        self,
        fetcher: Fetcher,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.logger = logger or structlog.get_logger("lexicon_crawler.collector")
        self._node_callbacks: list[tuple[str, NodeCallback]] = []
        self._page_callbacks: list[PageCallback] = []
        self._visited: set[str] = set()
        self._lock = Lock()

    def on_html(self, selector: str, callback: NodeCallback) -> None:
        """Call ``callback(node, page)`` for every node matching ``selector``."""

        self._node_callbacks.append((selector, callback))

    def on_page(self, callback: PageCallback) -> None:
        self._page_callbacks.append(callback)

    def has_visited(self, url: str) -> bool:
        with self._lock:
            return url in self._visited

    def visit(self, url: str) -> bool:
        """Fetch and process ``url`` synchronously.

        Returns False when the URL was already visited. Raises ``FetchError``
        when the page cannot be retrieved.
        """

        if not self._claim(url):
            return False
        response = self.fetcher.fetch(url)
        page = Page(url=response.url, tree=HTMLParser(response.text))
        for callback in self._page_callbacks:
            callback(page)
        for selector, node_callback in self._node_callbacks:
            for node in page.tree.css(selector):
                node_callback(node, page)
        return True

    def dispatch(self, pool: DispatchPool, url: str) -> bool:
        """Visit ``url`` on a worker; failures are logged, never raised."""

        return pool.submit(self._visit_logged, url)

    def _visit_logged(self, url: str) -> None:
        try:
            self.visit(url)
        except FetchError as exc:
            self.logger.warning("page_fetch_failed", url=url, reason=exc.reason)
        except Exception as exc:  # noqa: BLE001
            self.logger.error("page_processing_error", url=url, error=str(exc), exc_info=True)

    def _claim(self, url: str) -> bool:
        with self._lock:
            if url in self._visited:
                return False
            self._visited.add(url)
            return True


__all__ = ["Collector", "NodeCallback", "Page", "PageCallback"]
