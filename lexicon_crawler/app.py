"""Typer CLI entrypoint for Lexicon-Crawler."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository, CrawlConfig, TerminationPolicy
from .engine.exporter import ExporterSetupError
from .logging_conf import available_logs, configure_logging, default_log_dir, tail_log
from .orchestrator import CrawlSummary, Orchestrator
from .ui import ProgressReporter

app = typer.Typer(
    help="Lexicon-Crawler command line tool",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(name="config", help="Crawl configuration commands", no_args_is_help=True)
log_app = typer.Typer(name="log", help="Log viewing commands", no_args_is_help=True)

console = Console()

OrchestratorFactory = Callable[[CrawlConfig, Path, bool], Orchestrator]


def _build_orchestrator(config: CrawlConfig, output_path: Path, progress_enabled: bool) -> Orchestrator:
    return Orchestrator(
        config,
        output_path=output_path,
        progress=ProgressReporter(enabled=progress_enabled),
    )


@dataclass
class AppState:
    repository: ConfigRepository
    orchestrator_factory: OrchestratorFactory


def build_state(verbose: bool) -> AppState:
    configure_logging(verbose=verbose)
    return AppState(repository=ConfigRepository(), orchestrator_factory=_build_orchestrator)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _error(message: str) -> None:
    console.print(message, style="red", markup=False, highlight=False)


def _progress_default_enabled() -> bool:
    return bool(getattr(sys.stdout, "isatty", lambda: False)())


def _apply_overrides(
    config: CrawlConfig,
    letters: Optional[str],
    quiet_interval: Optional[float],
    cache_capacity: Optional[int],
    max_records: Optional[int],
    workers: Optional[int],
    unbounded: bool,
) -> CrawlConfig:
    payload = config.model_dump()
    if letters:
        payload["alphabet"] = letters
    if quiet_interval is not None:
        payload["quiet_interval"] = quiet_interval
    if cache_capacity is not None:
        payload["cache_capacity"] = cache_capacity
    if max_records is not None:
        payload["max_records"] = max_records
        payload["termination"] = TerminationPolicy.RECORD_CAP
    if unbounded:
        payload["fetch_workers"] = None
    elif workers is not None:
        payload["fetch_workers"] = workers
    return CrawlConfig.model_validate(payload)


def _render_summary(summary: CrawlSummary) -> Table:
    table = Table(title="Crawl summary", box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_row("Accepted", str(summary.accepted))
    table.add_row("Missed", str(summary.missed))
    table.add_row("Duplicates", str(summary.duplicates))
    table.add_row("Index pages", f"{summary.index_pages} ({summary.failed_index_pages} failed)")
    table.add_row("Entry links", str(summary.links))
    table.add_row("Stopped by", summary.stop_reason)
    table.add_row("Elapsed", f"{summary.elapsed:.1f}s")
    table.add_row("Output", str(summary.output_path))
    return table


app.add_typer(config_app, name="config")
app.add_typer(log_app, name="log")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    ctx.obj = build_state(verbose)


@app.command("crawl", help="Crawl the dictionary index and write accepted words to CSV.")
def crawl(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", help="Crawl configuration file (YAML or JSON)."),
    letters: Optional[str] = typer.Option(None, "--letters", help="Index symbols to enumerate, e.g. 'abc'."),
    quiet_interval: Optional[float] = typer.Option(None, "--quiet-interval", help="Seconds of inactivity that end the crawl."),
    cache_capacity: Optional[int] = typer.Option(None, "--cache-capacity", help="Dedup cache capacity."),
    max_records: Optional[int] = typer.Option(None, "--max-records", help="Stop after this many accepted words."),
    workers: Optional[int] = typer.Option(None, "--workers", help="Concurrent entry-page fetches."),
    unbounded: bool = typer.Option(False, "--unbounded", help="One thread per entry page, no worker limit."),
    output: Optional[Path] = typer.Option(None, "--output", help="CSV output path."),
    no_progress: bool = typer.Option(False, "--no-progress", help="Disable the progress display."),
) -> None:
    state = _get_state(ctx)
    try:
        config = state.repository.load_crawl_config(config_path)
        config = _apply_overrides(
            config, letters, quiet_interval, cache_capacity, max_records, workers, unbounded
        )
    except FileNotFoundError as exc:
        _error(str(exc))
        raise typer.Exit(code=1)
    except ValueError as exc:
        _error(f"Invalid configuration: {exc}")
        raise typer.Exit(code=1)

    output_path = output or state.repository.output_path(config)
    progress_enabled = not no_progress and _progress_default_enabled()
    orchestrator = state.orchestrator_factory(config, output_path, progress_enabled)
    try:
        summary = orchestrator.run()
    except ExporterSetupError as exc:
        _error(str(exc))
        raise typer.Exit(code=1)
    console.print(_render_summary(summary))


@config_app.command("init", help="Write the default crawl configuration.")
def config_init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration."),
) -> None:
    state = _get_state(ctx)
    path = state.repository.locator.crawl_config_path()
    if path.exists() and not force:
        console.print(f"Configuration already exists: {path} (use --force to overwrite)", style="yellow")
        raise typer.Exit(code=1)
    state.repository.save_crawl_config(CrawlConfig())
    console.print(f"Configuration written to {path}", style="green")


@config_app.command("show", help="Print the active crawl configuration.")
def config_show(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", help="Configuration file to show."),
) -> None:
    state = _get_state(ctx)
    try:
        config = state.repository.load_crawl_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        _error(str(exc))
        raise typer.Exit(code=1)
    console.print(
        yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False),
        end="",
        markup=False,
        highlight=False,
    )


@log_app.command("list", help="List available log files.")
def log_list() -> None:
    logs = list(available_logs())
    if not logs:
        console.print("No log files yet.", style="dim")
        return
    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("Log", style="cyan")
    table.add_column("Size", style="green", justify="right")
    for path in logs:
        table.add_row(path.name, f"{path.stat().st_size} B")
    console.print(table)


@log_app.command("show", help="Show the last lines of a log file.")
def log_show(
    name: str = typer.Argument("crawler", help="Log name without the .log suffix."),
    lines: int = typer.Option(50, "--lines", "-n", help="Number of lines to show."),
) -> None:
    path = default_log_dir() / f"{name}.log"
    if not path.exists():
        _error(f"Log not found: {path}")
        raise typer.Exit(code=1)
    for line in tail_log(path, lines):
        console.print(line.rstrip("\n"), markup=False, highlight=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
