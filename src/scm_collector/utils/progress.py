"""
Progress reporting for fetch phases.
"""
from rich.console import Console

from .logger import get_logger

logger = get_logger(__name__)


class ProgressReporter:
    """Receives a notification each time a fetch phase completes."""

    def fetching_finished(self, phase: str, emoji: str = "") -> None:
        raise NotImplementedError


class NullProgressReporter(ProgressReporter):
    """Discards progress notifications."""

    def fetching_finished(self, phase: str, emoji: str = "") -> None:
        pass


class ConsoleProgressReporter(ProgressReporter):
    """Prints finished phases to the terminal and the log."""

    def __init__(self, console: Console = None):
        self.console = console or Console(stderr=True)

    def fetching_finished(self, phase: str, emoji: str = "") -> None:
        message = f"Fetching {phase} Finished"
        self.console.print(f"{emoji}  [green]{message}[/green]" if emoji else f"[green]{message}[/green]")
        logger.info(message)
