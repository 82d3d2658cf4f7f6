"""Terminal progress helpers with Rich-based rendering."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text


@dataclass
class ProgressState:
    accepted: int = 0
    missed: int = 0
    duplicates: int = 0
    current_key: str | None = None


class RateColumn(ProgressColumn):
    """Accepted words per second."""

    def render(self, task: Task) -> Text:
        speed = task.finished_speed or task.speed
        if speed is None:
            return Text("", style="progress.percentage")
        return Text(f"{speed:.1f} word/s", style="progress.percentage")


class ProgressReporter:
    """Render an open-ended progress row; the total is never known up front."""

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self._console = console
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self.state = ProgressState()

    def start(self, label: str = "crawl") -> None:
        self.state = ProgressState()
        if not self.enabled:
            return
        if self._console is None:
            self._console = Console()
        if not self._console.is_terminal:
            self.enabled = False
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold blue]{task.fields[label]:<10}"),
            BarColumn(bar_width=None, pulse_style="cyan"),
            TimeElapsedColumn(),
            RateColumn(),
            TextColumn("[green]✓{task.fields[accepted]:>5}", justify="right"),
            TextColumn("[red]✗{task.fields[missed]:>4}", justify="right"),
            TextColumn("[yellow]↺{task.fields[duplicates]:>4}", justify="right"),
            TextColumn("{task.fields[current_key]}", style="dim", markup=False),
            console=self._console,
            transient=True,
            refresh_per_second=8,
            expand=True,
        )
        try:
            self._progress.__enter__()
        except LiveError:
            self.enabled = False
            self._progress = None
            return
        self._task_id = self._progress.add_task(
            "crawl",
            total=None,
            label=label,
            accepted=0,
            missed=0,
            duplicates=0,
            current_key="waiting…",
        )

    def advance(
        self,
        accepted: bool = False,
        missed: bool = False,
        duplicate: bool = False,
        key: str | None = None,
    ) -> None:
        if key:
            self.state.current_key = key
        if accepted:
            self.state.accepted += 1
        if missed:
            self.state.missed += 1
        if duplicate:
            self.state.duplicates += 1
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(
            self._task_id,
            advance=1 if accepted else 0,
            accepted=self.state.accepted,
            missed=self.state.missed,
            duplicates=self.state.duplicates,
            current_key=(self.state.current_key or "")[:40],
        )

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress.__exit__(None, None, None)
            self._progress = None
        self._task_id = None


__all__ = ["ProgressReporter", "ProgressState"]
