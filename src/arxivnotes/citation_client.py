"""Semantic Scholar citation-graph client."""

from __future__ import annotations

import json
from typing import Any

import requests

from .identifiers import semantic_scholar_id
from .logger import get_logger
from .models import CitationInfo, InfluentialPaper

logger = get_logger(__name__)


def select_influential(papers: list[dict[str, Any]] | None) -> list[InfluentialPaper]:
    """Keep entries flagged `isInfluential`, preserving their order."""

    return [
        InfluentialPaper.from_semantic_scholar(paper)
        for paper in papers or []
        if isinstance(paper, dict) and paper.get("isInfluential")
    ]


class CitationClient:
    """Fetch citation counts and influential papers for arXiv ids.

    Failures never propagate: the caller receives an empty result instead, so a
    Semantic Scholar outage only makes the metadata less rich.
    """

    BASE_URL = "https://api.semanticscholar.org/v1/paper"

    def __init__(
        self,
        timeout_sec: int = 30,
        trust_env: bool = False,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout_sec = timeout_sec
        self.session = session or requests.Session()
        self.session.trust_env = trust_env

    def _get_paper(self, arxiv_id: str) -> dict[str, Any] | None:
        url = f"{self.BASE_URL}/{semantic_scholar_id(arxiv_id)}"
        response = self.session.get(url, timeout=self.timeout_sec)
        if response.status_code == 404:
            logger.info("Paper not found in Semantic Scholar: %s", arxiv_id)
            return None
        if response.status_code != 200:
            logger.warning(
                "Unexpected response from Semantic Scholar for %s: HTTP %s",
                arxiv_id,
                response.status_code,
            )
            return None
        payload = json.loads(response.text)
        if not isinstance(payload, dict):
            logger.warning("Semantic Scholar returned a non-object payload for %s", arxiv_id)
            return None
        return payload

    def fetch_citation_info(self, arxiv_id: str) -> CitationInfo:
        try:
            data = self._get_paper(arxiv_id)
            if data is None:
                return CitationInfo.empty()
            info = CitationInfo(
                num_cited_by=int(data.get("numCitedBy") or 0),
                num_citing=int(data.get("numCiting") or 0),
                influential_citations=select_influential(data.get("citations")),
                influential_references=select_influential(data.get("references")),
            )
        except (requests.RequestException, ValueError, TypeError) as exc:
            logger.warning("Error fetching citation info for %s: %s", arxiv_id, exc)
            return CitationInfo.empty()

        logger.debug(
            "Citation info for %s: cited_by=%d citing=%d influential=%d/%d",
            arxiv_id,
            info.num_cited_by,
            info.num_citing,
            len(info.influential_citations),
            len(info.influential_references),
        )
        return info

    def get_citation_count(self, arxiv_id: str) -> int:
        try:
            data = self._get_paper(arxiv_id)
            if data is None:
                return 0
            return int(data.get("numCitedBy") or 0)
        except (requests.RequestException, ValueError, TypeError) as exc:
            logger.warning("Error fetching citation count for %s: %s", arxiv_id, exc)
            return 0
