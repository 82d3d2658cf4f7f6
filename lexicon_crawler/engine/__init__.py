"""Engine components orchestrating enumerate → fetch → dedup → export."""

from .collector import Collector, Page
from .completion import CompletionDetector, DetectorState
from .dedup import RecencyCache
from .definitions import DefinitionFetcher
from .enumerator import EnumerationSummary, IndexEnumerator
from .fetcher import FetchError, FetchResponse, Fetcher
from .links import LinkExtractor, PageRole
from .parser import Attribute, Outcome, Parser, UnresolvedRecord, WordRecord
from .queues import ClosableQueue, QueueClosed
from .thread_pool import DispatchPool

__all__ = [
    "Attribute",
    "ClosableQueue",
    "Collector",
    "CompletionDetector",
    "DefinitionFetcher",
    "DetectorState",
    "DispatchPool",
    "EnumerationSummary",
    "FetchError",
    "FetchResponse",
    "Fetcher",
    "IndexEnumerator",
    "LinkExtractor",
    "Outcome",
    "Page",
    "PageRole",
    "Parser",
    "QueueClosed",
    "RecencyCache",
    "UnresolvedRecord",
    "WordRecord",
]
