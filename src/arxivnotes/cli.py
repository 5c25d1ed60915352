"""CLI entrypoint for arxiv-notes."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from .arxiv_client import ArxivClient
from .citation_client import CitationClient
from .config import Settings, load_settings
from .downloader import PaperDownloader
from .exceptions import ArxivNotesError, InvalidInputError
from .logger import setup_logging
from .materializer import NoteMaterializer, render_metadata_markdown
from .metadata import MetadataFetcher
from .progress import SummaryProgressTracker
from .search import ArxivSearch
from .summarization_client import SummarizationClient
from .summarizer import ArxivSummarizer
from .vault import NOTE_SUFFIX, FileSystemVault


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Enrich Markdown paper notes with arXiv summaries, metadata and citations"
    )
    parser.add_argument("--dotenv", type=Path, default=None, help="Path to .env file")
    parser.add_argument("--vault", type=Path, default=None, help="Override VAULT_DIR")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summarize = subparsers.add_parser("summarize", help="Append an AI summary to a note")
    summarize.add_argument("url", help="arXiv abstract or PDF URL")
    summarize.add_argument("note", help="Note name or path inside the vault")
    summarize.add_argument(
        "--no-rich",
        action="store_true",
        default=False,
        help="Disable the Rich live progress display",
    )

    metadata = subparsers.add_parser(
        "metadata", help="Fill a note with bibliographic metadata and citations"
    )
    metadata.add_argument("url", help="arXiv abstract or PDF URL")
    metadata.add_argument(
        "note",
        nargs="?",
        default=None,
        help="Note name or path; a dated note is created when omitted",
    )
    links = metadata.add_mutually_exclusive_group()
    links.add_argument(
        "--links",
        dest="links",
        action="store_true",
        default=None,
        help="Create a linked note for every influential paper",
    )
    links.add_argument(
        "--no-links",
        dest="links",
        action="store_false",
        help="List influential papers as plain titles",
    )
    metadata.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        default=False,
        help="Print the metadata as Markdown instead of editing a note",
    )

    download = subparsers.add_parser("download", help="Download the PDF of a paper note")
    download.add_argument("note", help="Note name or path inside the vault")

    search = subparsers.add_parser("search", help="Search arXiv titles ranked by citations")
    search.add_argument("title", help="Title words to search for")
    search.add_argument("--top", type=int, default=3, help="Number of hits to show")

    return parser.parse_args(argv)


def resolve_note(vault: FileSystemVault, note: str) -> Path:
    if note.endswith(NOTE_SUFFIX):
        path = Path(note)
        return path if path.is_absolute() else vault.root / path
    return vault.note_path(note)


def _run_summarize(
    args: argparse.Namespace,
    settings: Settings,
    vault: FileSystemVault,
    console: Console,
) -> None:
    document = resolve_note(vault, args.note)
    if not document.exists():
        raise InvalidInputError(f"Note does not exist: {document}")

    client = SummarizationClient(
        base_url=settings.summary_base_url,
        timeout_sec=settings.http_timeout_sec,
        trust_env=settings.network_trust_env,
    )
    tracker = None if args.no_rich else SummaryProgressTracker(title=args.url, console=console)
    summarizer = ArxivSummarizer(
        client=client,
        api_key=settings.summary_api_key,
        target_language=settings.summary_target_language,
        translate=settings.summary_translate,
        max_attempts=settings.summary_max_attempts,
        initial_interval_sec=settings.summary_initial_interval_sec,
        max_interval_sec=settings.summary_max_interval_sec,
        initial_delay_sec=settings.summary_initial_delay_sec,
        progress_callback=tracker,
    )

    if tracker:
        tracker.start()
    try:
        summary = summarizer.summarize(args.url)
    finally:
        if tracker:
            tracker.stop()

    NoteMaterializer(vault).insert_summary(document, summary)
    console.print(f"[green]Summary inserted into {document}[/green]")


def _run_metadata(
    args: argparse.Namespace,
    settings: Settings,
    vault: FileSystemVault,
    console: Console,
) -> None:
    fetcher = MetadataFetcher(
        arxiv_client=ArxivClient(
            timeout_sec=settings.http_timeout_sec,
            trust_env=settings.network_trust_env,
        ),
        citation_client=CitationClient(
            timeout_sec=settings.http_timeout_sec,
            trust_env=settings.network_trust_env,
        ),
    )
    with console.status("Fetching metadata..."):
        metadata = fetcher.fetch(args.url)

    if args.print_only:
        console.print(Markdown(render_metadata_markdown(metadata)))
        return

    if args.note:
        document = resolve_note(vault, args.note)
    else:
        name = f"Arxiv Paper - {date.today().isoformat()}"
        document = vault.note_path(name)
        if not document.exists():
            document = vault.create_document(name, "")
            console.print(f"Created note: {document.name}")

    create_links = settings.create_linked_notes if args.links is None else args.links
    materializer = NoteMaterializer(
        vault,
        create_linked_notes=create_links,
        collision_policy=settings.note_collision_policy,
    )
    document = materializer.insert_metadata(document, metadata)
    console.print(f"[green]Metadata inserted into {document}[/green]")


def _run_download(
    args: argparse.Namespace,
    settings: Settings,
    vault: FileSystemVault,
    console: Console,
) -> None:
    downloader = PaperDownloader(
        arxiv_client=ArxivClient(
            timeout_sec=settings.http_timeout_sec,
            trust_env=settings.network_trust_env,
        ),
        store=vault,
        paper_dir=settings.paper_dir,
    )
    target = downloader.download(resolve_note(vault, args.note))
    console.print(f"[green]Paper downloaded: {target}[/green]")


def _run_search(
    args: argparse.Namespace,
    settings: Settings,
    vault: FileSystemVault,
    console: Console,
) -> None:
    searcher = ArxivSearch(
        arxiv_client=ArxivClient(
            timeout_sec=settings.http_timeout_sec,
            trust_env=settings.network_trust_env,
        ),
        citation_client=CitationClient(
            timeout_sec=settings.http_timeout_sec,
            trust_env=settings.network_trust_env,
        ),
    )
    hits = searcher.search(args.title, top_n=args.top)
    if not hits:
        console.print("No search results.")
        return

    table = Table(title=f"arXiv: {args.title}")
    table.add_column("Citations", justify="right")
    table.add_column("Title")
    table.add_column("Authors")
    table.add_column("Published")
    table.add_column("ID")
    for hit in hits:
        table.add_row(str(hit.citations), hit.title, hit.authors, hit.published, hit.arxiv_id)
    console.print(table)


COMMANDS = {
    "summarize": _run_summarize,
    "metadata": _run_metadata,
    "download": _run_download,
    "search": _run_search,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    console = Console()

    try:
        settings = load_settings(dotenv_path=args.dotenv)
        setup_logging(settings.log_level)
        vault = FileSystemVault(args.vault or settings.vault_dir)
        COMMANDS[args.command](args, settings, vault, console)
    except ArxivNotesError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
