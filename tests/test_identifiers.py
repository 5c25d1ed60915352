import pytest

from arxivnotes.identifiers import (
    extract_arxiv_id,
    is_valid_arxiv_url,
    normalize_arxiv_url,
    sanitize_file_name,
    semantic_scholar_id,
)


@pytest.mark.parametrize(
    "raw",
    [
        "https://arxiv.org/pdf/2301.00001.pdf",
        "http://arxiv.org/pdf/2301.00001.pdf",
        "http://arxiv.org/abs/2301.00001",
        "  https://arxiv.org/pdf/2301.00001  ",
        "https://arxiv.org/abs/2301.00001",
    ],
)
def test_normalize_rewrites_pdf_and_http_forms_to_abstract_page(raw):
    normalized = normalize_arxiv_url(raw)

    assert normalized == "https://arxiv.org/abs/2301.00001"
    assert normalize_arxiv_url(normalized) == normalized
    assert is_valid_arxiv_url(normalized)


def test_normalize_is_idempotent_for_arbitrary_text():
    for raw in ["not a url", "https://example.com/paper.pdf", "http://arxiv.org/pdf/2405.12345v2"]:
        once = normalize_arxiv_url(raw)
        assert normalize_arxiv_url(once) == once


def test_validate_rejects_other_hosts_and_bare_prefix():
    assert not is_valid_arxiv_url("https://example.com/abs/2301.00001")
    assert not is_valid_arxiv_url("https://arxiv.org/abs/")
    assert not is_valid_arxiv_url("http://arxiv.org/abs/2301.00001")
    assert is_valid_arxiv_url("HTTPS://ARXIV.ORG/ABS/2301.00001")


def test_extract_arxiv_id():
    assert extract_arxiv_id("https://arxiv.org/abs/2301.00001v3") == "2301.00001"
    assert extract_arxiv_id("https://arxiv.org/list/cs.LG") is None


def test_semantic_scholar_id_strips_version_and_prefix():
    assert semantic_scholar_id("2301.00001") == "arXiv:2301.00001"
    assert semantic_scholar_id("http://arxiv.org/abs/2301.00001v2") == "arXiv:2301.00001"


def test_sanitize_file_name_replaces_path_characters():
    assert sanitize_file_name("BERT: Pre-training a/b\\c") == "BERT_ Pre-training a_b_c"
