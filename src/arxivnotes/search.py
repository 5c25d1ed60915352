"""arXiv title search ranked by Semantic Scholar citation counts."""

from __future__ import annotations

from typing import Any

from .arxiv_client import ArxivClient
from .citation_client import CitationClient
from .exceptions import InvalidInputError
from .logger import get_logger
from .models import SearchHit

logger = get_logger(__name__)

NOT_AVAILABLE = "N/A"


def build_title_query(text: str) -> str:
    return 'ti:"{}"'.format(text.strip())


def parse_search_entry(entry: dict[str, Any]) -> SearchHit:
    authors = [
        str(author.get("name") or "")
        for author in entry.get("authors") or []
        if isinstance(author, dict)
    ]
    return SearchHit(
        arxiv_id=str(entry.get("id") or NOT_AVAILABLE),
        published=str(entry.get("published") or NOT_AVAILABLE),
        title=str(entry.get("title") or NOT_AVAILABLE),
        summary=str(entry.get("summary") or NOT_AVAILABLE),
        authors=", ".join(authors),
    )


class ArxivSearch:
    def __init__(
        self,
        arxiv_client: ArxivClient,
        citation_client: CitationClient,
        max_results: int = 10,
    ) -> None:
        self.arxiv_client = arxiv_client
        self.citation_client = citation_client
        self.max_results = max_results

    def search(self, title: str, top_n: int = 3) -> list[SearchHit]:
        if not title.strip():
            raise InvalidInputError("Select some text to search for")

        entries = self.arxiv_client.search_entries(
            build_title_query(title), max_results=self.max_results
        )
        hits = [parse_search_entry(entry) for entry in entries]
        for hit in hits:
            hit.citations = self.citation_client.get_citation_count(hit.arxiv_id)

        hits.sort(key=lambda hit: hit.citations, reverse=True)
        logger.info("Search for %r returned %d hits", title, len(hits))
        return hits[:top_n]
