from __future__ import annotations

import io

from rich.console import Console

from lexicon_crawler.ui import ProgressReporter


def test_disabled_reporter_still_counts() -> None:
    reporter = ProgressReporter(enabled=False)
    reporter.start()
    reporter.advance(accepted=True, key="run")
    reporter.advance(missed=True)
    reporter.advance(duplicate=True, key="run")
    reporter.close()
    assert reporter.state.accepted == 1
    assert reporter.state.missed == 1
    assert reporter.state.duplicates == 1
    assert reporter.state.current_key == "run"


def test_non_terminal_console_disables_rendering() -> None:
    console = Console(file=io.StringIO(), force_terminal=False)
    reporter = ProgressReporter(enabled=True, console=console)
    reporter.start()
    assert reporter.enabled is False
    reporter.advance(accepted=True, key="jump")
    reporter.close()
    assert reporter.state.accepted == 1


def test_terminal_console_renders_progress_row() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=True, width=120)
    reporter = ProgressReporter(enabled=True, console=console)
    reporter.start(label="words")
    reporter.advance(accepted=True, key="jump")
    reporter.close()
    assert reporter.enabled is True
    assert reporter.state.accepted == 1
    assert buffer.getvalue()


def test_current_key_is_rendered_as_plain_text() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=True, width=120)
    reporter = ProgressReporter(enabled=True, console=console)
    reporter.start()
    reporter.advance(accepted=True, key="[/oops] [bold]")
    reporter.close()
    assert reporter.state.current_key == "[/oops] [bold]"
