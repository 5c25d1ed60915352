"""Typed models used across arxiv-notes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class InfluentialPaper:
    """One influential entry of a paper's citation graph."""

    paper_id: str
    title: str
    url: str | None = None
    venue: str | None = None
    year: int | None = None
    authors: str = ""
    arxiv_id: str | None = None
    doi: str | None = None
    citation_count: int | None = None
    intent: list[str] = field(default_factory=list)

    @classmethod
    def from_semantic_scholar(cls, entry: dict[str, Any]) -> InfluentialPaper:
        authors = entry.get("authors") or []
        return cls(
            paper_id=str(entry.get("paperId") or ""),
            title=str(entry.get("title") or ""),
            url=entry.get("url"),
            venue=entry.get("venue"),
            year=entry.get("year"),
            authors=", ".join(
                str(author.get("name") or "") for author in authors if isinstance(author, dict)
            ),
            arxiv_id=entry.get("arxivId"),
            doi=entry.get("doi"),
            citation_count=entry.get("citationCount"),
            intent=list(entry.get("intent") or []),
        )


@dataclass(frozen=True)
class CitationInfo:
    """Citation counts and influential subsets for one paper."""

    num_cited_by: int
    num_citing: int
    influential_citations: list[InfluentialPaper]
    influential_references: list[InfluentialPaper]

    @classmethod
    def empty(cls) -> CitationInfo:
        return cls(
            num_cited_by=0,
            num_citing=0,
            influential_citations=[],
            influential_references=[],
        )


@dataclass(frozen=True)
class PaperMetadata:
    """Bibliographic record of one arXiv paper."""

    title: str
    paper_link: str
    publish_date: str
    authors: str
    abstract: str
    num_cited_by: int = 0
    num_citing: int = 0
    influential_citations: list[InfluentialPaper] = field(default_factory=list)
    influential_references: list[InfluentialPaper] = field(default_factory=list)

    def to_front_matter(self) -> dict[str, object]:
        return {
            "title": self.title,
            "paper_link": self.paper_link,
            "publish_date": self.publish_date,
            "authors": self.authors,
            "num_cited_by": self.num_cited_by,
            "num_citing": self.num_citing,
        }


class JobState(str, enum.Enum):
    """States of a summarization job."""

    PRECHECK = "precheck"
    CACHED_HIT = "cached_hit"
    SUBMIT = "submit"
    ACCEPTED = "accepted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass
class SummarizationJob:
    """Transient state of one summarize operation."""

    source_url: str
    target_language: str
    request_id: str | None = None
    attempt_count: int = 0
    current_interval_sec: float = 1.0
    state: JobState = JobState.PRECHECK


@dataclass(frozen=True)
class SummaryResult:
    """Decoded result payload of a completed summarization job."""

    raw_result: Any
    source_url: str


@dataclass
class SearchHit:
    """One arXiv search result with its citation count."""

    arxiv_id: str
    published: str
    title: str
    summary: str
    authors: str
    citations: int = 0


@dataclass(frozen=True)
class MaterializedNote:
    """Outcome of materializing one influential paper as a note."""

    title: str
    path: Path | None
    created: bool
    error: str | None = None
