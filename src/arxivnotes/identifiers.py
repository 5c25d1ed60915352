"""arXiv URL normalization and identifier helpers."""

from __future__ import annotations

import re

ARXIV_ABS_BASE = "https://arxiv.org/abs/"
ARXIV_PDF_BASE = "https://arxiv.org/pdf/"

_HTTP_PREFIX_PATTERN = re.compile(r"^http:")
_PDF_PATH_PATTERN = re.compile(r"arxiv\.org/pdf")
_PDF_SUFFIX_PATTERN = re.compile(r"(?:\.pdf)+$")
_VALID_URL_PATTERN = re.compile(r"^https://arxiv\.org/abs/.+", re.IGNORECASE)
_ARXIV_ID_PATTERN = re.compile(r"arxiv\.org/abs/(\d+\.\d+)")
_VERSION_SUFFIX_PATTERN = re.compile(r"v\d+$")
_UNSAFE_FILENAME_PATTERN = re.compile(r"[:/\\]")


def normalize_arxiv_url(text: str) -> str:
    """Rewrite PDF and plain-HTTP arXiv links to the https abstract-page form."""

    url = text.strip()
    url = _HTTP_PREFIX_PATTERN.sub("https:", url)
    url = _PDF_PATH_PATTERN.sub("arxiv.org/abs", url)
    url = _PDF_SUFFIX_PATTERN.sub("", url)
    return url


def is_valid_arxiv_url(url: str) -> bool:
    return bool(_VALID_URL_PATTERN.match(url))


def extract_arxiv_id(url: str) -> str | None:
    match = _ARXIV_ID_PATTERN.search(url)
    return match.group(1) if match else None


def semantic_scholar_id(arxiv_id: str) -> str:
    """Build the compound `arXiv:<id>` key used by Semantic Scholar."""

    clean_id = _VERSION_SUFFIX_PATTERN.sub("", arxiv_id.strip())
    for prefix in ("http://arxiv.org/abs/", "https://arxiv.org/abs/"):
        if clean_id.startswith(prefix):
            clean_id = clean_id[len(prefix):]
    if clean_id.startswith("arXiv:"):
        return clean_id
    return f"arXiv:{clean_id}"


def abs_url(arxiv_id: str) -> str:
    return f"{ARXIV_ABS_BASE}{arxiv_id}"


def pdf_url(arxiv_id: str) -> str:
    return f"{ARXIV_PDF_BASE}{arxiv_id}.pdf"


def sanitize_file_name(name: str) -> str:
    return _UNSAFE_FILENAME_PATTERN.sub("_", name)
