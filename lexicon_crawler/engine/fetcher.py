"""HTTP fetching over a shared httpx client."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from ..config import HttpConfig


class FetchError(RuntimeError):
    """Raised when a page cannot be retrieved. No retry is attempted."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Fetch failed for {url}: {reason}")
        self.url = url
        self.reason = reason


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    status_code: int
    text: str


class Fetcher:
    """Issue GET requests; safe to share between worker threads."""

    def __init__(self, http_config: HttpConfig, logger: structlog.BoundLogger | None = None) -> None:
        self.http_config = http_config
        self.logger = logger or structlog.get_logger("lexicon_crawler.fetcher")
        headers = {"User-Agent": http_config.user_agent}
        headers.update(http_config.extra_headers)
        self._client = httpx.Client(
            follow_redirects=http_config.follow_redirects,
            timeout=http_config.timeout,
            headers=headers,
        )

    def close(self) -> None:
        self._client.close()

    def fetch(self, url: str) -> FetchResponse:
        if self._client.is_closed:
            raise FetchError(url, "client closed")
        try:
            response = self._client.request(method="GET", url=url, timeout=self.http_config.timeout)
        except httpx.HTTPError as exc:
            self.logger.debug("fetch_transport_error", url=url, error=str(exc))
            raise FetchError(url, str(exc) or exc.__class__.__name__) from exc
        except RuntimeError as exc:
            # httpx refuses requests once the client is closed mid-flight
            if not self._client.is_closed:
                raise
            raise FetchError(url, "client closed") from exc
        if self._is_failure(response):
            raise FetchError(url, f"unexpected status {response.status_code}")
        return FetchResponse(
            url=str(response.url),
            status_code=response.status_code,
            text=response.text,
        )

    @staticmethod
    def _is_failure(response) -> bool:
        status = getattr(response, "status_code", 0)
        return status >= 400 or status == 0


__all__ = ["FetchError", "FetchResponse", "Fetcher"]
