"""Console feedback with Rich progress bars."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import final

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from pixelpress.renderers.result_renderer import DisplayableResult


def configure_logging(console: Console, verbose: bool = False) -> None:
    """Route library logging through Rich.

    Args:
        console: Console the log records are printed to
        verbose: Show debug records when True, otherwise warnings only
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose)],
        force=True,
    )
    # Keep urllib3 connection chatter out of verbose output
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@final
class ProgressTracker:
    """Reports workflow progress and results on the console."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the progress tracker.

        Args:
            console: Rich console instance. If None, creates a new one.
        """
        self.console = console or Console()

    @contextmanager
    def track_transfer(self, caption: str, total_bytes: int) -> Iterator[TransferProgressContext]:
        """Context manager showing a spinner and upload progress for one transfer.

        Args:
            caption: In-progress caption, e.g. "Compressing..."
            total_bytes: Size of the upload body, if known

        Yields:
            Context whose ``update`` can be passed as a progress callback
        """
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(binary_units=True),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task_id = progress.add_task(caption, total=total_bytes or None)
            yield TransferProgressContext(progress, task_id)

    def display_result(self, result: DisplayableResult) -> None:
        """Display the size comparison for a rendered result.

        Args:
            result: The result to describe
        """
        table = Table(title="Result")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        if result.metrics is not None:
            table.add_row("Original", result.metrics.format_original())
            table.add_row("Compressed", result.metrics.format_compressed())
            table.add_row("Reduction", result.metrics.format_reduction())
        else:
            table.add_row("Status", "Complete")
        table.add_row("File", result.suggested_filename)

        self.console.print(table)

    def display_error(self, message: str, exception: Exception | None = None) -> None:
        """Display an error message with optional exception details.

        Args:
            message: Error message to display
            exception: Optional exception for additional context
        """
        self.console.print(f"[red]Error: {message}[/red]")
        if exception:
            self.console.print(f"[dim]Details: {exception}[/dim]")

    def display_warning(self, message: str) -> None:
        self.console.print(f"[yellow]Warning: {message}[/yellow]")

    def display_success(self, message: str) -> None:
        self.console.print(f"[green]Success: {message}[/green]")

    def display_info(self, message: str) -> None:
        self.console.print(f"[blue]Info: {message}[/blue]")


@final
class TransferProgressContext:
    """Context for tracking the upload of one transfer."""

    def __init__(self, progress: Progress, task_id: TaskID) -> None:
        self.progress = progress
        self.task_id = task_id

    def update(self, bytes_sent: int, total_bytes: int) -> None:
        """Update the upload progress.

        Args:
            bytes_sent: Bytes of the request body sent so far
            total_bytes: Total size of the request body
        """
        self.progress.update(self.task_id, completed=bytes_sent, total=total_bytes)
