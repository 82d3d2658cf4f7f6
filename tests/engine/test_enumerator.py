from __future__ import annotations

from lexicon_crawler.config import SelectorConfig
from lexicon_crawler.engine import ClosableQueue, Collector, IndexEnumerator, LinkExtractor


def _enumerator(fetcher, html) -> IndexEnumerator:
    return IndexEnumerator(Collector(fetcher), LinkExtractor(SelectorConfig()), html.index_url)


def _drain(links: ClosableQueue[str]) -> list[str]:
    links.close()
    return list(links)


def test_idiom_anchor_is_skipped_and_sub_indices_recursed(fake_fetcher, html) -> None:
    sub_one = html.base_url + "/browse/english/a/a-1/"
    sub_two = html.base_url + "/browse/english/a/a-2/"
    pages = {
        html.index_url("a"): html.index_page(
            sub_indices=[sub_one, sub_two],
            entries=[("/dictionary/english/at-all", "idiom")],
        ),
        sub_one: html.index_page(entries=[("/dictionary/english/apple", "noun")]),
        sub_two: html.index_page(entries=[("/dictionary/english/abide", "verb")]),
    }
    fetcher = fake_fetcher(pages)
    links: ClosableQueue[str] = ClosableQueue()

    summary = _enumerator(fetcher, html).enumerate(["a"], links)

    assert fetcher.calls == [html.index_url("a"), sub_one, sub_two]
    assert _drain(links) == [html.entry_url("apple"), html.entry_url("abide")]
    assert summary.index_pages == 3
    assert summary.links_emitted == 2


def test_failed_index_fetch_skips_only_that_branch(fake_fetcher, html) -> None:
    sub_ok = html.base_url + "/browse/english/c/c-1/"
    pages = {
        html.index_url("c"): html.index_page(
            sub_indices=[html.base_url + "/browse/english/c/broken/", sub_ok],
        ),
        sub_ok: html.index_page(entries=[("/dictionary/english/cat", "noun")]),
    }
    fetcher = fake_fetcher(pages)
    links: ClosableQueue[str] = ClosableQueue()

    summary = _enumerator(fetcher, html).enumerate(["b", "c"], links)

    assert summary.symbols == 2
    assert summary.failed_pages == 2
    assert summary.index_pages == 2
    assert _drain(links) == [html.entry_url("cat")]


def test_enumerator_does_not_close_link_queue(fake_fetcher, html) -> None:
    fetcher = fake_fetcher({html.index_url("a"): html.index_page(entries=[("/dictionary/english/a", "noun")])})
    links: ClosableQueue[str] = ClosableQueue()
    _enumerator(fetcher, html).enumerate(["a"], links)
    assert not links.closed


def test_enumerator_stops_when_link_queue_closed(fake_fetcher, html) -> None:
    fetcher = fake_fetcher({})
    links: ClosableQueue[str] = ClosableQueue()
    links.close()
    summary = _enumerator(fetcher, html).enumerate(["a", "b"], links)
    assert summary.symbols == 0
    assert fetcher.calls == []


def test_sub_index_cycles_are_visited_once(fake_fetcher, html) -> None:
    sub = html.base_url + "/browse/english/d/d-1/"
    pages = {
        html.index_url("d"): html.index_page(sub_indices=[sub]),
        sub: html.index_page(sub_indices=[html.index_url("d"), sub], entries=[("/dictionary/english/dog", "noun")]),
    }
    fetcher = fake_fetcher(pages)
    links: ClosableQueue[str] = ClosableQueue()
    _enumerator(fetcher, html).enumerate(["d"], links)
    assert fetcher.calls == [html.index_url("d"), sub]
    assert _drain(links) == [html.entry_url("dog")]
