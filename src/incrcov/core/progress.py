"""User-facing feedback for CLI operations.

Usage::

    from incrcov.core.progress import status, task

    status("Loading coverage...")
    status("Wrote 3 reports", style="success")  # ✓ Wrote 3 reports

    with task("Writing html report"):
        report.write_report(collector, context)  # structlog console output paused
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from incrcov.coverage.models import CoverageSummary

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_suppress_console_logs = threading.local()


def is_console_suppressed() -> bool:
    """Check if console logging is currently suppressed."""
    return getattr(_suppress_console_logs, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Pause structlog console output; file handlers still receive logs."""
    _suppress_console_logs.active = True
    try:
        yield
    finally:
        _suppress_console_logs.active = False


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from incrcov.core.logging import get_logger

    return get_logger("progress")


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)

    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" / "3 files" style counts."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


@contextmanager
def task(name: str) -> Iterator[None]:
    """Context manager for a named task with timing.

    Usage::

        with task("Writing html report"):
            ...
        # Prints: ✓ Writing html report (0.2s)
    """
    import time

    log = _get_logger()
    log.debug("task_start", task=name)
    start = time.perf_counter()

    try:
        if _is_tty():
            with suppress_console_logs(), _console.status(f"[cyan]{name}[/cyan]", spinner="dots"):
                yield
        else:
            yield
        elapsed = time.perf_counter() - start
        status(f"{name} ({elapsed:.1f}s)", style="success")
        log.debug("task_done", task=name, elapsed_s=elapsed)
    except Exception as e:
        elapsed = time.perf_counter() - start
        status(f"{name} failed: {e}", style="error")
        log.error("task_failed", task=name, elapsed_s=elapsed, error=str(e))
        raise


def summary_table(title: str, summaries: dict[str, CoverageSummary]) -> Table:
    """Build a table with one row per labelled summary (e.g. "all", "incremental")."""
    table = Table(title=title, title_justify="left")
    table.add_column("Scope")
    for dimension in ("Statements", "Branches", "Functions", "Lines"):
        table.add_column(dimension, justify="right")

    for label, summary in summaries.items():
        cells = [
            f"{m.pct:.2f}% ({m.covered}/{m.total})"
            for m in (summary.statements, summary.branches, summary.functions, summary.lines)
        ]
        table.add_row(label, *cells)
    return table


def print_summary(title: str, summaries: dict[str, CoverageSummary]) -> None:
    """Print the coverage summary table to stderr."""
    _console.print(summary_table(title, summaries))
