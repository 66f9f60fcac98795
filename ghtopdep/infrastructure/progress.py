"""Progress sinks for the page aggregation loop."""
from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn

from ghtopdep.domain.progress_interface import IProgressSink


class NullProgressSink(IProgressSink):
    """Discards every progress event."""

    def start(self, total: int) -> None:
        pass

    def update(self, current: int) -> None:
        pass

    def stop(self) -> None:
        pass


class RichProgressSink(IProgressSink):
    """Renders a progress bar on the terminal.

    Nothing is shown when GitHub does not advertise a total.
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console(stderr=True)
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def start(self, total: int) -> None:
        if total <= 0:
            return

        self._progress = Progress(
            TextColumn("Progress"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            MofNCompleteColumn(),
            TextColumn("Dependencies"),
            console=self._console,
            transient=True,
        )
        self._progress.start()
        self._task = self._progress.add_task("dependents", total=total)

    def update(self, current: int) -> None:
        if self._progress is not None:
            self._progress.update(self._task, completed=current)

    def stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None
