"""arXiv export API client."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import feedparser
import requests

from .exceptions import UpstreamError
from .identifiers import pdf_url
from .logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger(__name__)

USER_AGENT = "arxiv-notes/1.0 (https://github.com/arxiv-notes/arxiv-notes)"


class ArxivClient:
    """Thin wrapper for the arXiv query and PDF endpoints."""

    BASE_URL = "https://export.arxiv.org/api/query"

    def __init__(
        self,
        timeout_sec: int = 30,
        trust_env: bool = False,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout_sec = timeout_sec
        self.session = session or requests.Session()
        self.session.trust_env = trust_env
        self.session.headers.update({"User-Agent": USER_AGENT})
        self._sleep = sleep

    def fetch_entry(self, arxiv_id: str) -> dict[str, Any]:
        """Fetch the Atom entry for one arXiv id."""

        logger.info("Fetching arXiv metadata for %s", arxiv_id)
        try:
            response = self.session.get(
                self.BASE_URL,
                params={"id_list": arxiv_id},
                timeout=self.timeout_sec,
            )
        except requests.RequestException as exc:
            raise UpstreamError(f"arXiv request failed for {arxiv_id}: {exc}") from exc

        if response.status_code != 200:
            raise UpstreamError(
                f"arXiv API request failed: HTTP {response.status_code}"
            )

        feed = feedparser.parse(response.text)
        if feed.bozo:
            logger.warning("Feed parsing for %s had issues, but continuing...", arxiv_id)

        if not feed.entries:
            raise UpstreamError(f"No paper information found for {arxiv_id}")
        return feed.entries[0]

    def search_raw(
        self,
        query: str,
        max_results: int = 10,
        max_retries: int = 10,
        retry_delay_sec: float = 5.0,
    ) -> str:
        """Run a search query, retrying a fixed number of times with a flat delay."""

        params = {
            "search_query": query,
            "start": "0",
            "max_results": str(max_results),
        }

        for attempt in range(max_retries):
            try:
                response = self.session.get(
                    self.BASE_URL,
                    params=params,
                    timeout=self.timeout_sec,
                )
                if response.status_code != 200:
                    raise UpstreamError(f"HTTP error! status: {response.status_code}")
                return response.text
            except (requests.RequestException, UpstreamError) as exc:
                logger.warning("Search attempt %d failed: %s", attempt + 1, exc)
                if attempt >= max_retries - 1:
                    logger.error("Reached the maximum number of retries, giving up")
                    if isinstance(exc, UpstreamError):
                        raise
                    raise UpstreamError(f"arXiv search failed: {exc}") from exc
                self._sleep(retry_delay_sec)

        raise UpstreamError(f"arXiv search failed after retries: {query}")

    def search_entries(self, query: str, max_results: int = 10) -> list[dict[str, Any]]:
        text = self.search_raw(query, max_results=max_results)
        return list(feedparser.parse(text).entries)

    def fetch_pdf(self, arxiv_id: str) -> bytes:
        url = pdf_url(arxiv_id)
        logger.info("Downloading %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout_sec)
        except requests.RequestException as exc:
            raise UpstreamError(f"PDF download failed: {exc}") from exc
        if response.status_code != 200:
            raise UpstreamError(f"PDF download failed: HTTP {response.status_code}")
        return response.content
