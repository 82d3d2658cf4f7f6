"""Shared fixtures: crawl config builder, HTML builders and an in-memory fetcher."""

from __future__ import annotations

import os
from threading import Lock
from types import SimpleNamespace
from typing import Any, Callable, Iterable, Sequence

import pytest

from lexicon_crawler.config import CrawlConfig
from lexicon_crawler.engine.fetcher import FetchError, FetchResponse

BASE_URL = "https://dict.test"
INDEX_TEMPLATE = BASE_URL + "/browse/english/{letter}/"


def index_url(letter: str) -> str:
    return INDEX_TEMPLATE.format(letter=letter)


def entry_url(slug: str) -> str:
    return f"{BASE_URL}/dictionary/english/{slug}"


def index_page(
    sub_indices: Iterable[str] = (),
    entries: Iterable[tuple[str, str]] = (),
) -> str:
    """Build an index page; ``entries`` holds (href, part-of-speech label) pairs."""

    subs = "".join(f'<li><a class="dil tcbd" href="{href}">chunk</a></li>' for href in sub_indices)
    words = "".join(
        f'<li><a class="tc-bd" href="{href}"><span class="hw">w</span>'
        f'<span class="pos">{label}</span></a></li>'
        for href, label in entries
    )
    return f"<html><body><ul class='subs'>{subs}</ul><ul class='words'>{words}</ul></body></html>"


def entry_page(
    headword: str | None = None,
    fallback: str | None = None,
    labels: Sequence[str] = (),
) -> str:
    parts = []
    if headword is not None:
        parts.append(f'<span class="hw dhw">{headword}</span>')
    if fallback is not None:
        parts.append(f'<h2 class="headword">{fallback}</h2>')
    parts.extend(f'<span class="pos dpos">{label}</span>' for label in labels)
    return f"<html><body><article id='page-content'>{''.join(parts)}</article></body></html>"


class FakeFetcher:
    """Serve canned HTML by URL; unknown URLs fail like a 404."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = dict(pages or {})
        self.calls: list[str] = []
        self.closed = False
        self._lock = Lock()

    def fetch(self, url: str) -> FetchResponse:
        with self._lock:
            self.calls.append(url)
        if url not in self.pages:
            raise FetchError(url, "unexpected status 404")
        return FetchResponse(url=url, status_code=200, text=self.pages[url])

    def close(self) -> None:
        self.closed = True


@pytest.fixture(scope="session", autouse=True)
def isolated_home(tmp_path_factory: pytest.TempPathFactory) -> Iterable[None]:
    home = tmp_path_factory.mktemp("home")
    previous = os.environ.get("LEXICON_CRAWLER_HOME")
    os.environ["LEXICON_CRAWLER_HOME"] = str(home)
    yield
    if previous is None:
        os.environ.pop("LEXICON_CRAWLER_HOME", None)
    else:
        os.environ["LEXICON_CRAWLER_HOME"] = previous


@pytest.fixture
def sample_crawl_config() -> Callable[..., CrawlConfig]:
    def _builder(**overrides: Any) -> CrawlConfig:
        base: dict[str, Any] = {
            "index_url_template": INDEX_TEMPLATE,
            "alphabet": "a",
            "quiet_interval": 0.5,
            "cache_capacity": 20,
            "fetch_workers": 1,
        }
        base.update(overrides)
        return CrawlConfig(**base)

    return _builder


@pytest.fixture
def html() -> SimpleNamespace:
    return SimpleNamespace(
        base_url=BASE_URL,
        index_url=index_url,
        entry_url=entry_url,
        index_page=index_page,
        entry_page=entry_page,
    )


@pytest.fixture
def fake_fetcher() -> Callable[[dict[str, str]], FakeFetcher]:
    return FakeFetcher
