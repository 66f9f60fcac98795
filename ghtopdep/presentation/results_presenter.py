"""Terminal and JSON rendering of dependents results."""
import json
from typing import Iterable, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ghtopdep.domain.models import DependentEntry, DependentsResult


def format_stars(stars: int) -> str:
    """Humanize a star count: 999, 1.2K, 12K, 1.2M."""
    if stars < 1000:
        return str(stars)
    if stars < 10000:
        return f"{round(stars / 100) / 10:g}K"
    if stars < 1000000:
        return f"{round(stars / 1000)}K"
    return f"{round(stars / 100000) / 10:g}M"


class ResultsPresenter:
    """Prints results either as tables or as JSON."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def display_project_info(self, full_name: str, entity_type: str, package_name: Optional[str] = None) -> None:
        lines = [f"[bold cyan]Repository:[/] {full_name}", f"[bold cyan]Type:[/] {entity_type}"]
        if package_name:
            lines.append(f"[bold cyan]Package:[/] {package_name}")
        self._console.print(Panel("\n".join(lines), box=box.DOUBLE, expand=False))

    def _entries_table(self, title: str, entries: Iterable[DependentEntry], style: str) -> Table:
        table = Table(title=title, title_justify="left", header_style=style)
        table.add_column("URL")
        table.add_column("Stars", justify="right")
        for entry in entries:
            table.add_row(entry.url, format_stars(entry.stars))
        return table

    def display_table(self, result: DependentsResult, entity_type: str, rows: int) -> None:
        if not result.repositories:
            self._console.print(f"[yellow]No {entity_type} found[/]")
            return

        self._console.print(
            self._entries_table(f"Top {entity_type} by stars", result.repositories, "cyan")
        )
        self._console.print(
            self._entries_table(f"Latest {entity_type}", result.latest_dependents[:rows], "blue")
        )

        if result.stats.total_count > 0:
            self._console.print(
                f"[dim]Found {result.stats.total_count} {entity_type}, others are private[/]"
            )
            self._console.print(
                f"[dim]Found {result.stats.with_stars_count} {entity_type} with more than zero stars[/]"
            )

    def display_json(self, result: DependentsResult) -> None:
        self._console.print_json(json.dumps(result.to_dict()))

    def display(self, result: DependentsResult, entity_type: str, output_format: str = "table", rows: int = 10) -> None:
        """Render ``result`` in the requested output format ("table" or "json")."""
        if output_format == "json":
            self.display_json(result)
        else:
            self.display_table(result, entity_type, rows)

    def display_package_not_found(self, package_name: str, available_packages: Sequence[str]) -> None:
        self._console.print(f'[red]Package "{package_name}" not found[/]')
        if available_packages:
            self._console.print("[yellow]Available packages:[/]")
            for name in available_packages:
                self._console.print(f"[dim]  - {name}[/]")
        else:
            self._console.print("[yellow]No packages found for this repository[/]")
