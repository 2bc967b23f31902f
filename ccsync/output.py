"""Output formatting for the command line."""

import json
from typing import Any

from rich.console import Console


class OutputFormatter:
    """Prints human-readable or JSON output.

    Informational messages go to stdout and are hidden in quiet or JSON
    mode. Warnings and errors go to stderr and are always shown.
    """

    def __init__(self, json_output: bool = False, quiet: bool = False):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of text
            quiet: Suppress non-essential output
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.error_console = Console(stderr=True, highlight=False)

    @property
    def _silent(self) -> bool:
        return self.quiet or self.json_output

    def print(self, message: str = "") -> None:
        """Print a plain line."""
        if not self._silent:
            self.console.print(message, markup=False, soft_wrap=True)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if not self._silent:
            self.console.print(message, markup=False, soft_wrap=True)

    def success(self, message: str) -> None:
        """Print a success message."""
        if not self._silent:
            self.console.print(message, style="green", markup=False, soft_wrap=True)

    def warning(self, message: str) -> None:
        """Print a warning to stderr."""
        self.error_console.print(
            message, style="yellow", markup=False, soft_wrap=True
        )

    def error(self, message: str) -> None:
        """Print an error to stderr."""
        self.error_console.print(
            f"Error: {message}", style="bold red", markup=False, soft_wrap=True
        )

    def output_json(self, data: Any) -> None:
        """Print data as JSON to stdout."""
        self.console.print(
            json.dumps(data, indent=2, default=str), markup=False, soft_wrap=True
        )
