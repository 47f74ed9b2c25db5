"""Rich output helpers for the pathkit command line."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from pathkit.path import Path


class ConsoleOutput:
    """Formats command results for the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize output.

        Args:
            console: Console to print to. Defaults to standard output.
        """
        self.console = console or Console()

    def show_paths(self, paths: list[Path], title: str) -> None:
        """Display a table of paths.

        Args:
            paths: Paths to list.
            title: Table title.
        """
        if not paths:
            self.console.print("[yellow]No matching paths[/yellow]")
            return

        table = Table(title=title)
        table.add_column("Path", style="cyan")
        table.add_column("Type")

        for path in paths:
            table.add_row(escape(str(path)), "dir" if path.is_dir() else "file")

        self.console.print(table)

    def show_locations(self, locations: dict[str, str | None]) -> None:
        """Display named locations, marking the ones that could not be found."""
        table = Table(title="Environment")
        table.add_column("Location", style="cyan")
        table.add_column("Path")

        for name, value in locations.items():
            table.add_row(name, escape(value) if value is not None else "[dim]unavailable[/dim]")

        self.console.print(table)

    def show_text(self, text: str) -> None:
        """Print text verbatim, without markup or highlighting."""
        self.console.print(text, markup=False, highlight=False, end="")

    def show_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")
