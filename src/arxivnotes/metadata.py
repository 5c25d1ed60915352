"""Read-through metadata fetcher for arXiv papers."""

from __future__ import annotations

import dataclasses
import re
from typing import Any

from .arxiv_client import ArxivClient
from .citation_client import CitationClient
from .exceptions import InvalidIdentifierError
from .identifiers import extract_arxiv_id, normalize_arxiv_url
from .logger import get_logger
from .models import PaperMetadata

logger = get_logger(__name__)

NO_TITLE = "No title"
NO_DATE = "No date"
NO_ABSTRACT = "No abstract"

_WHITESPACE_PATTERN = re.compile(r"\s+")
_PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\s*\n")


class MetadataCache:
    """In-memory metadata store keyed by arXiv id. Last writer wins."""

    def __init__(self) -> None:
        self._entries: dict[str, PaperMetadata] = {}

    def get(self, arxiv_id: str) -> PaperMetadata | None:
        return self._entries.get(arxiv_id)

    def put(self, arxiv_id: str, metadata: PaperMetadata) -> None:
        self._entries[arxiv_id] = metadata

    def __contains__(self, arxiv_id: object) -> bool:
        return arxiv_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def normalize_abstract(raw: str | None) -> str:
    """Collapse wrapped lines and keep blank-line separated paragraphs."""

    text = (raw or "").strip()
    if not text:
        return NO_ABSTRACT
    paragraphs = [
        _WHITESPACE_PATTERN.sub(" ", chunk).strip()
        for chunk in _PARAGRAPH_BREAK_PATTERN.split(text)
    ]
    return "\n\n".join(paragraph for paragraph in paragraphs if paragraph) or NO_ABSTRACT


def parse_metadata_entry(entry: dict[str, Any], fallback_link: str) -> PaperMetadata:
    title = _WHITESPACE_PATTERN.sub(" ", str(entry.get("title") or "")).strip()
    published = str(entry.get("published") or "")
    authors = [
        str(author.get("name") or "")
        for author in entry.get("authors") or []
        if isinstance(author, dict)
    ]
    return PaperMetadata(
        title=title or NO_TITLE,
        paper_link=str(entry.get("id") or "") or fallback_link,
        publish_date=published.split("T")[0] if published else NO_DATE,
        authors=", ".join(name for name in authors if name),
        abstract=normalize_abstract(entry.get("summary")),
    )


class MetadataFetcher:
    """Fetch arXiv metadata enriched with Semantic Scholar citation data."""

    def __init__(
        self,
        arxiv_client: ArxivClient,
        citation_client: CitationClient,
        cache: MetadataCache | None = None,
    ) -> None:
        self.arxiv_client = arxiv_client
        self.citation_client = citation_client
        self.cache = cache if cache is not None else MetadataCache()

    def fetch(self, url: str) -> PaperMetadata:
        normalized = normalize_arxiv_url(url)
        arxiv_id = extract_arxiv_id(normalized)
        if not arxiv_id:
            raise InvalidIdentifierError(f"Not a valid arXiv URL: {url}")

        cached = self.cache.get(arxiv_id)
        if cached is not None:
            logger.debug("Metadata cache hit for %s", arxiv_id)
            return cached

        entry = self.arxiv_client.fetch_entry(arxiv_id)
        metadata = parse_metadata_entry(entry, fallback_link=normalized)

        citation_info = self.citation_client.fetch_citation_info(arxiv_id)
        metadata = dataclasses.replace(
            metadata,
            num_cited_by=citation_info.num_cited_by,
            num_citing=citation_info.num_citing,
            influential_citations=citation_info.influential_citations,
            influential_references=citation_info.influential_references,
        )

        self.cache.put(arxiv_id, metadata)
        logger.info("Fetched metadata for %s: %s", arxiv_id, metadata.title)
        return metadata
