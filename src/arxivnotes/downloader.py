"""Download a note's paper PDF into the configured paper directory."""

from __future__ import annotations

from pathlib import Path

from .arxiv_client import ArxivClient
from .exceptions import ConfigError, InvalidIdentifierError
from .identifiers import extract_arxiv_id
from .logger import get_logger
from .vault import DocumentStore

logger = get_logger(__name__)

DOWNLOADED_PDF_HEADING = "## Downloaded PDF"


class PaperDownloader:
    def __init__(
        self,
        arxiv_client: ArxivClient,
        store: DocumentStore,
        paper_dir: Path | None,
    ) -> None:
        self.arxiv_client = arxiv_client
        self.store = store
        self.paper_dir = paper_dir

    def download(self, document: Path) -> Path:
        """Fetch the PDF linked by the note's `paper_link` field and link it back."""

        if self.paper_dir is None or not str(self.paper_dir).strip():
            raise ConfigError("PAPER_DIR is not configured")

        paper_link = self.store.read_structured_fields(document).get("paper_link")
        if not paper_link:
            raise InvalidIdentifierError(f"No paper_link found in {document.name}")

        arxiv_id = extract_arxiv_id(str(paper_link))
        if not arxiv_id:
            raise InvalidIdentifierError(f"No valid arXiv id in paper_link: {paper_link}")

        pdf_bytes = self.arxiv_client.fetch_pdf(arxiv_id)
        file_name = f"{arxiv_id}.pdf"

        paper_dir = self.paper_dir
        if not paper_dir.is_absolute():
            paper_dir = self.store.root / paper_dir
        paper_dir.mkdir(parents=True, exist_ok=True)
        target = paper_dir / file_name
        target.write_bytes(pdf_bytes)
        logger.info("Paper downloaded: %s", target)

        self.store.append(
            document,
            f"\n\n{DOWNLOADED_PDF_HEADING}\n- [[{self._link_path(target)}|{file_name}]]",
        )
        return target

    def _link_path(self, target: Path) -> str:
        """Vault-relative link target; absolute when the PDF lives outside the vault."""

        try:
            return target.relative_to(self.store.root).as_posix()
        except ValueError:
            return target.as_posix()
