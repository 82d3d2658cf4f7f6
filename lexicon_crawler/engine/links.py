"""Classify index-page anchors into sub-index links and entry links."""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterator
from urllib.parse import urlparse

import structlog
from selectolax.parser import Node

from ..config import SelectorConfig
from .collector import Page


class PageRole(str, Enum):
    """What kind of links a page is being mined for."""

    INDEX_OF_INDICES = "index-of-indices"
    INDEX_OF_ENTRIES = "index-of-entries"


class LinkExtractor:
    """Yield candidate links from an index page for a given role."""

    def __init__(self, selectors: SelectorConfig, logger: structlog.BoundLogger | None = None) -> None:
        self.selectors = selectors
        self.logger = logger or structlog.get_logger("lexicon_crawler.links")
        self._idiom = re.compile(selectors.idiom_pattern)
        self._entry_path = re.compile(selectors.entry_path_pattern)

    def extract(self, page: Page, role: PageRole) -> Iterator[str]:
        if role is PageRole.INDEX_OF_INDICES:
            yield from self._sub_index_links(page)
        else:
            yield from self._entry_links(page)

    def _sub_index_links(self, page: Page) -> Iterator[str]:
        for node in page.tree.css(self.selectors.sub_index):
            href = self._href(node)
            if href is not None:
                yield page.absolute(href)

    def _entry_links(self, page: Page) -> Iterator[str]:
        for node in page.tree.css(self.selectors.entry):
            href = self._href(node)
            if href is None:
                continue
            url = page.absolute(href)
            if self.is_idiom(node):
                self.logger.debug("entry_dropped", url=url, reason="idiom")
                continue
            if not self.is_entry_url(url):
                self.logger.debug("entry_dropped", url=url, reason="url_shape")
                continue
            yield url

    def is_idiom(self, anchor: Node) -> bool:
        labels = " ".join(
            pos.text(separator=" ", strip=True) for pos in anchor.css(self.selectors.entry_pos)
        )
        return bool(self._idiom.search(labels))

    def is_entry_url(self, url: str) -> bool:
        return bool(self._entry_path.search(urlparse(url).path))

    @staticmethod
    def _href(node: Node) -> str | None:
        href = (node.attributes.get("href") or "").strip()
        if not href or href.startswith(("javascript:", "#")):
            return None
        return href


__all__ = ["LinkExtractor", "PageRole"]
