import pytest

from arxivnotes.exceptions import CapabilityUnavailable
from arxivnotes.materializer import NoteMaterializer, format_paper_note
from arxivnotes.models import InfluentialPaper, PaperMetadata
from arxivnotes.vault import FileSystemVault, split_front_matter


def _metadata(**overrides):
    values = dict(
        title="Attention: Is All You Need",
        paper_link="http://arxiv.org/abs/1706.03762v7",
        publish_date="2017-06-12",
        authors="Ashish Vaswani, Noam Shazeer",
        abstract="The dominant sequence transduction models...",
        num_cited_by=100,
        num_citing=40,
        influential_citations=[
            InfluentialPaper(paper_id="a", title="BERT", arxiv_id="1810.04805", year=2018),
            InfluentialPaper(paper_id="b", title="GPT/2", url="https://s2.example/b"),
        ],
        influential_references=[],
    )
    values.update(overrides)
    return PaperMetadata(**values)


def _read_note(path):
    return split_front_matter(path.read_text(encoding="utf-8"))


def test_insert_metadata_fills_front_matter_sections_and_renames(tmp_path):
    vault = FileSystemVault(tmp_path)
    note = vault.create_document("Inbox", "---\nrating: 5\ntags:\n- nlp\n---\nMy notes\n")

    final_path = NoteMaterializer(vault).insert_metadata(note, _metadata())

    assert final_path == tmp_path / "Attention_ Is All You Need.md"
    assert not note.exists()
    fields, body = _read_note(final_path)
    assert fields["title"] == "Attention: Is All You Need"
    assert fields["paper_link"] == "http://arxiv.org/abs/1706.03762v7"
    assert fields["num_cited_by"] == 100
    assert fields["num_citing"] == 40
    assert fields["rating"] == 5
    assert fields["tags"] == ["nlp"]
    assert fields["checked"] is False
    assert fields["interest"] is None
    assert body.startswith("My notes\n\n## Abstract\nThe dominant")
    assert "## Influential Papers Cited By\n\n- [[BERT]]\n- [[GPT_2]]\n" in body
    assert "## Influential Papers Citing\n\nNo information available.\n" in body

    bert_fields, _ = _read_note(tmp_path / "BERT.md")
    assert bert_fields["paper_link"] == "https://arxiv.org/abs/1810.04805"
    assert bert_fields["year"] == 2018
    assert bert_fields["doi"] == "N/A"
    gpt_fields, _ = _read_note(tmp_path / "GPT_2.md")
    assert gpt_fields["semanticscholar_link"] == "https://s2.example/b"
    assert gpt_fields["paper_link"] == ""


def test_insert_metadata_is_idempotent_for_existing_sections(tmp_path):
    vault = FileSystemVault(tmp_path)
    note = vault.create_document("Paper", "")
    materializer = NoteMaterializer(vault)

    first = materializer.insert_metadata(note, _metadata())
    second = materializer.insert_metadata(first, _metadata())

    text = second.read_text(encoding="utf-8")
    assert text.count("## Abstract") == 1
    assert text.count("## Influential Papers Cited By") == 1
    assert text.count("## Influential Papers Citing") == 1


def test_plain_mode_lists_titles_without_creating_notes(tmp_path):
    vault = FileSystemVault(tmp_path)
    note = vault.create_document("Paper", "")

    final_path = NoteMaterializer(vault, create_linked_notes=False).insert_metadata(
        note, _metadata()
    )

    _, body = _read_note(final_path)
    assert "- BERT\n- GPT/2\n" in body
    assert not (tmp_path / "BERT.md").exists()


def test_missing_front_matter_capability_is_reported(tmp_path):
    vault = FileSystemVault(tmp_path, structured_fields=False)
    note = vault.create_document("Paper", "")

    with pytest.raises(CapabilityUnavailable):
        NoteMaterializer(vault).insert_metadata(note, _metadata())


@pytest.mark.parametrize(
    ("policy", "expected_names", "bert_content_kept"),
    [
        ("skip", ["BERT"], True),
        ("overwrite", ["BERT"], False),
        ("suffix", ["BERT (2)"], True),
    ],
)
def test_collision_policies(tmp_path, policy, expected_names, bert_content_kept):
    vault = FileSystemVault(tmp_path)
    (tmp_path / "BERT.md").write_text("hand-written notes", encoding="utf-8")
    materializer = NoteMaterializer(vault, collision_policy=policy)

    notes = materializer.materialize_papers([InfluentialPaper(paper_id="a", title="BERT")], tmp_path)

    assert [note.title for note in notes] == expected_names
    original = (tmp_path / "BERT.md").read_text(encoding="utf-8")
    assert (original == "hand-written notes") is bert_content_kept


def test_duplicate_titles_in_one_batch_get_suffixes(tmp_path):
    vault = FileSystemVault(tmp_path)
    papers = [
        InfluentialPaper(paper_id="a", title="Survey: A"),
        InfluentialPaper(paper_id="b", title="Survey/ A"),
    ]

    notes = NoteMaterializer(vault, collision_policy="suffix").materialize_papers(papers, tmp_path)

    assert [note.title for note in notes] == ["Survey_ A", "Survey_ A (2)"]
    assert all(note.created for note in notes)


def test_failed_note_creation_does_not_stop_the_batch(tmp_path):
    class FlakyVault(FileSystemVault):
        def create_document(self, name, text, folder=None):
            if name == "Broken":
                raise PermissionError("read-only")
            return super().create_document(name, text, folder)

    vault = FlakyVault(tmp_path)
    papers = [
        InfluentialPaper(paper_id="a", title="Broken"),
        InfluentialPaper(paper_id="b", title="Fine"),
    ]

    notes = NoteMaterializer(vault).materialize_papers(papers, tmp_path)

    assert notes[0].created is False
    assert "read-only" in notes[0].error
    assert notes[1].created is True
    assert (tmp_path / "Fine.md").exists()


def test_insert_summary_appends_with_blank_line(tmp_path):
    vault = FileSystemVault(tmp_path)
    note = vault.create_document("Paper", "Existing")

    NoteMaterializer(vault).insert_summary(note, "## Arxiv Paper Summary")

    assert note.read_text(encoding="utf-8") == "Existing\n\n## Arxiv Paper Summary"


def test_format_paper_note_quotes_titles_safely():
    paper = InfluentialPaper(
        paper_id="x",
        title='A "quoted": title',
        intent=["background", "result"],
        citation_count=3,
    )

    fields, body = split_front_matter(format_paper_note(paper))

    assert fields["title"] == 'A "quoted": title'
    assert fields["intent"] == ["background", "result"]
    assert fields["citations"] == 3
    assert fields["authors"] == "N/A"
    assert body == ""
