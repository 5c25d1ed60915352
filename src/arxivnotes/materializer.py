"""Render paper metadata into vault notes."""

from __future__ import annotations

from pathlib import Path

import yaml

from .exceptions import CapabilityUnavailable
from .identifiers import abs_url, sanitize_file_name
from .logger import get_logger
from .models import InfluentialPaper, MaterializedNote, PaperMetadata
from .vault import DocumentStore, join_front_matter, split_front_matter

logger = get_logger(__name__)

ABSTRACT_HEADING = "## Abstract"
CITED_BY_HEADING = "## Influential Papers Cited By"
CITING_HEADING = "## Influential Papers Citing"
NO_INFORMATION = "No information available.\n"
NOT_AVAILABLE = "N/A"
PRESERVED_FIELDS = {"checked": False, "interest": None, "rating": None, "tags": None}


def format_paper_note(paper: InfluentialPaper) -> str:
    fields: dict[str, object] = {
        "title": paper.title,
        "authors": paper.authors or NOT_AVAILABLE,
        "year": paper.year or NOT_AVAILABLE,
        "venue": paper.venue or NOT_AVAILABLE,
        "paper_link": abs_url(paper.arxiv_id) if paper.arxiv_id else "",
        "semanticscholar_link": paper.url or "#",
        "arxiv_id": paper.arxiv_id or NOT_AVAILABLE,
        "doi": paper.doi or NOT_AVAILABLE,
        "citations": paper.citation_count or NOT_AVAILABLE,
        "intent": list(paper.intent),
    }
    dumped = yaml.safe_dump(fields, sort_keys=False, allow_unicode=True)
    return f"---\n{dumped}---\n"


def render_metadata_markdown(metadata: PaperMetadata) -> str:
    """Standalone Markdown rendering of a metadata record."""

    lines = [
        f"## {metadata.title}",
        "",
        f"- Authors: {metadata.authors or NOT_AVAILABLE}",
        f"- Published: {metadata.publish_date}",
        f"- Link: {metadata.paper_link}",
        f"- Cited by: {metadata.num_cited_by} | Citing: {metadata.num_citing}",
        "",
        "### Abstract",
        metadata.abstract,
    ]
    for heading, papers in (
        ("### Influential Papers Cited By", metadata.influential_citations),
        ("### Influential Papers Citing", metadata.influential_references),
    ):
        lines.extend(["", heading])
        lines.extend(f"- {paper.title}" for paper in papers)
        if not papers:
            lines.append(NO_INFORMATION.strip())
    return "\n".join(lines) + "\n"


def note_name_for(paper: InfluentialPaper) -> str:
    return sanitize_file_name(paper.title or paper.paper_id or "Untitled")


class NoteMaterializer:
    """Write summaries, metadata and influential-paper notes into a vault.

    Influential papers are either written as `[[links]]` to notes created for
    each of them, or as plain bullet titles, depending on `create_linked_notes`.
    When a note with the same name exists, `collision_policy` decides:
    `skip` keeps it, `overwrite` replaces it, `suffix` picks `Name (2)` etc.
    """

    def __init__(
        self,
        store: DocumentStore,
        create_linked_notes: bool = True,
        collision_policy: str = "skip",
    ) -> None:
        self.store = store
        self.create_linked_notes = create_linked_notes
        self.collision_policy = collision_policy

    def insert_summary(self, document: Path, summary: str) -> None:
        self.store.append(document, "\n\n" + summary)

    def insert_metadata(self, document: Path, metadata: PaperMetadata) -> Path:
        """Fill front matter and sections for `document`; returns its final path."""

        if not self.store.supports_structured_fields:
            raise CapabilityUnavailable("Front matter editing is not available in this vault")

        existing = self.store.read_structured_fields(document)
        fields = {
            key: value if value else existing.get(key)
            for key, value in metadata.to_front_matter().items()
        }
        fields["num_cited_by"] = metadata.num_cited_by or 0
        fields["num_citing"] = metadata.num_citing or 0
        for key, default in PRESERVED_FIELDS.items():
            fields[key] = existing.get(key, default)
        self.store.set_structured_fields(document, fields)

        front_matter, body = split_front_matter(self.store.read(document), document.name)
        if ABSTRACT_HEADING not in body:
            abstract_section = f"{ABSTRACT_HEADING}\n{metadata.abstract}\n"
            if body.strip() == "":
                body = abstract_section.strip()
            else:
                body = body.strip() + "\n\n" + abstract_section
        body = body.strip("\n")
        self.store.write(document, join_front_matter(front_matter, body))

        document = self._rename(document, metadata.title)
        self._insert_influential_sections(document, metadata)
        return document

    def _rename(self, document: Path, title: str) -> Path:
        if not title:
            return document
        try:
            renamed = self.store.rename_document(document, sanitize_file_name(title))
        except OSError as exc:
            logger.warning("Could not rename %s: %s", document, exc)
            return document
        logger.info("Renamed note to %s", renamed.name)
        return renamed

    def _insert_influential_sections(self, document: Path, metadata: PaperMetadata) -> None:
        content = self.store.read(document)
        new_content = content

        if CITED_BY_HEADING not in new_content:
            new_content += (
                f"\n\n{CITED_BY_HEADING}\n\n"
                + self._render_paper_list(metadata.influential_citations, document.parent)
            )
        if CITING_HEADING not in new_content:
            new_content += (
                f"\n\n{CITING_HEADING}\n\n"
                + self._render_paper_list(metadata.influential_references, document.parent)
            )

        if new_content != content:
            self.store.write(document, new_content)

    def _render_paper_list(self, papers: list[InfluentialPaper], folder: Path) -> str:
        if not papers:
            return NO_INFORMATION
        if not self.create_linked_notes:
            return "".join(f"- {paper.title}\n" for paper in papers)

        notes = self.materialize_papers(papers, folder)
        return "".join(f"- [[{note.title}]]\n" for note in notes)

    def materialize_papers(
        self, papers: list[InfluentialPaper], folder: Path
    ) -> list[MaterializedNote]:
        """Create one note per paper; a failed note never stops the others."""

        notes: list[MaterializedNote] = []
        for paper in papers:
            try:
                notes.append(self.ensure_paper_note(paper, folder))
            except OSError as exc:
                logger.error("Failed to create note for %s: %s", paper.title, exc)
                notes.append(
                    MaterializedNote(
                        title=note_name_for(paper),
                        path=None,
                        created=False,
                        error=str(exc),
                    )
                )
        created = sum(1 for note in notes if note.created)
        logger.info("Materialized %d/%d influential paper notes", created, len(notes))
        return notes

    def ensure_paper_note(self, paper: InfluentialPaper, folder: Path) -> MaterializedNote:
        name = note_name_for(paper)
        content = format_paper_note(paper)

        if self.store.exists(name, folder):
            path = self.store.note_path(name, folder)
            if self.collision_policy == "skip":
                logger.debug("Note %s exists, skipping", name)
                return MaterializedNote(title=name, path=path, created=False)
            if self.collision_policy == "overwrite":
                self.store.write(path, content)
                return MaterializedNote(title=name, path=path, created=True)
            name = self._next_free_name(name, folder)

        path = self.store.create_document(name, content, folder)
        return MaterializedNote(title=name, path=path, created=True)

    def _next_free_name(self, name: str, folder: Path) -> str:
        index = 2
        while self.store.exists(f"{name} ({index})", folder):
            index += 1
        return f"{name} ({index})"
