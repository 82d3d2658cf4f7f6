"""Dictionary entry records and the extraction rule that produces them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Union

from selectolax.parser import HTMLParser, Node

from ..config import SelectorConfig


class Attribute(str, Enum):
    """Grammatical categories, declared in persisted column order."""

    NOUN = "noun"
    ADJECTIVE = "adjective"
    VERB = "verb"
    PHRASAL_VERB = "phrasal verb"
    ADVERB = "adverb"


LABEL_TO_ATTRIBUTE: dict[str, Attribute] = {attribute.value: attribute for attribute in Attribute}


@dataclass(frozen=True, slots=True)
class WordRecord:
    """A resolved entry: headword plus the categories observed on its page."""

    key: str
    attributes: frozenset[Attribute] = field(default_factory=frozenset)
    url: str | None = field(default=None, compare=False)

    def flags(self) -> tuple[int, ...]:
        return tuple(int(attribute in self.attributes) for attribute in Attribute)


@dataclass(frozen=True, slots=True)
class UnresolvedRecord:
    """An entry page on which no headword could be found."""

    url: str


Outcome = Union[WordRecord, UnresolvedRecord]


def _clean(text: str) -> str:
    return " ".join(text.split())


def attributes_from_labels(labels: Iterable[str]) -> frozenset[Attribute]:
    """Map part-of-speech labels to attributes; unknown labels are ignored."""

    found = set()
    for label in labels:
        attribute = LABEL_TO_ATTRIBUTE.get(_clean(label))
        if attribute is not None:
            found.add(attribute)
    return frozenset(found)


class Parser:
    """Turn an entry page into a ``WordRecord`` or ``UnresolvedRecord``."""

    def __init__(self, selectors: SelectorConfig | None = None) -> None:
        self.selectors = selectors or SelectorConfig()

    def parse_definition(self, html: str, url: str) -> Outcome | None:
        """Parse a whole document; None when it has no article container."""

        article = HTMLParser(html).css_first(self.selectors.article)
        if article is None:
            return None
        return self.parse_article(article, url)

    def parse_article(self, article: Node, url: str) -> Outcome:
        key = self._first_text(article, self.selectors.headword)
        if key is None:
            key = self._first_text(article, self.selectors.fallback_headword)
        if key is None:
            return UnresolvedRecord(url=url)
        labels = (node.text(separator=" ", strip=True) for node in article.css(self.selectors.part_of_speech))
        return WordRecord(key=key, attributes=attributes_from_labels(labels), url=url)

    @staticmethod
    def _first_text(root: Node, selector: str) -> str | None:
        node = root.css_first(selector)
        if node is None:
            return None
        text = _clean(node.text(separator=" ", strip=True))
        return text or None


__all__ = [
    "Attribute",
    "LABEL_TO_ATTRIBUTE",
    "Outcome",
    "Parser",
    "UnresolvedRecord",
    "WordRecord",
    "attributes_from_labels",
]
