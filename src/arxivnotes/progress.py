"""Rich-based progress display for summarization jobs."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import JobState


@dataclass
class JobStage:
    """Represents one displayed phase of a summarization job."""

    name: str
    status: str = "pending"  # pending, running, completed, skipped, failed
    start_time: float | None = None
    end_time: float | None = None
    details: str = ""

    @property
    def display_status(self) -> str:
        status_icons = {
            "pending": "⏸️",
            "running": "⏳",
            "completed": "✅",
            "skipped": "⏭️",
            "failed": "❌",
        }
        return status_icons.get(self.status, "⏸️")

    @property
    def elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time or time.time()
        return end - self.start_time

    def start(self, details: str = "") -> None:
        self.status = "running"
        self.details = details
        if self.start_time is None:
            self.start_time = time.time()

    def finish(self, status: str, details: str = "") -> None:
        self.status = status
        if details:
            self.details = details
        if self.start_time is None:
            self.start_time = time.time()
        self.end_time = time.time()


# job state -> (stage updates as (stage name, status))
_STATE_UPDATES: dict[str, list[tuple[str, str]]] = {
    JobState.PRECHECK.value: [("Precheck", "running")],
    JobState.CACHED_HIT.value: [
        ("Precheck", "completed"),
        ("Submit", "skipped"),
        ("Polling", "skipped"),
    ],
    JobState.SUBMIT.value: [("Precheck", "completed"), ("Submit", "running")],
    JobState.ACCEPTED.value: [("Submit", "completed")],
    JobState.FAILED.value: [("Submit", "failed")],
    JobState.POLLING.value: [("Polling", "running")],
    JobState.COMPLETED.value: [("Polling", "completed")],
    JobState.ERROR.value: [("Polling", "failed")],
    JobState.TIMEOUT.value: [("Polling", "failed")],
}


@dataclass
class SummaryProgressTracker:
    """Live panel that follows a job through its states."""

    title: str
    console: Console = field(default_factory=Console)
    stages: list[JobStage] = field(
        default_factory=lambda: [JobStage("Precheck"), JobStage("Submit"), JobStage("Polling")]
    )
    _live: Live | None = None
    _start_time: float = field(default_factory=time.time)

    def start(self) -> None:
        """Start the live display."""
        self._live = Live(
            self._render(),
            console=self.console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()

    def stop(self) -> None:
        """Stop the live display."""
        if self._live:
            self._live.stop()
            self._live = None

    def __call__(self, state: str, details: str = "") -> None:
        for stage_name, status in _STATE_UPDATES.get(state, []):
            stage = self._stage(stage_name)
            if status == "running":
                if stage.status == "running":
                    stage.details = details
                else:
                    stage.start(details)
            else:
                stage.finish(status, details)
        if self._live:
            self._live.update(self._render())

    def _stage(self, name: str) -> JobStage:
        for stage in self.stages:
            if stage.name == name:
                return stage
        raise KeyError(name)

    def _render(self) -> Panel:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Content", ratio=1)
        table.add_row(Text(f"📄 {self.title}", style="bold cyan"))
        for stage in self.stages:
            table.add_row(self._format_stage(stage))

        footer = Text(
            f"Elapsed: {self._format_time(time.time() - self._start_time)}", style="dim"
        )
        table.add_row(footer)

        return Panel(
            table,
            title="[bold blue]Arxiv Summarization[/bold blue]",
            border_style="blue",
        )

    def _format_stage(self, stage: JobStage) -> Text:
        text = Text(f"   ├── {stage.display_status} {stage.name}")

        if stage.details:
            text.append(f"  ({stage.details})", style="dim")

        if stage.status == "running":
            text.append(f"  [{self._format_time(stage.elapsed)}]", style="dim")
            text.stylize("yellow")
        elif stage.status == "completed":
            text.stylize("green")
        elif stage.status == "failed":
            text.stylize("red")

        return text

    def _format_time(self, seconds: float) -> str:
        """Format elapsed time as human readable string."""
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m{secs:02d}s"
