"""Terminal reporter for status and error messages."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


class CLIReporter:
    """Rich terminal output for command status lines.

    Errors go to stderr so that stdout stays parseable.
    """

    def __init__(self) -> None:
        """Initialize the CLI reporter."""
        self.console = console
        self.err_console = err_console

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def print_failure(self, message: str) -> None:
        """Print a failed check on stdout."""
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def print_skip(self, message: str) -> None:
        """Print a skipped step."""
        self.console.print(f"[yellow]⊘[/yellow] {escape(message)}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(escape(message))

    def print_hint(self, message: str) -> None:
        """Print an indented, dimmed hint."""
        self.console.print(f"  [dim]{escape(message)}[/dim]")

    def print_error(self, message: str) -> None:
        """Print an error message to stderr."""
        self.err_console.print(f"[red]✗[/red] {escape(message)}")

    def print_error_hint(self, message: str) -> None:
        """Print a follow-up line for an error to stderr."""
        self.err_console.print(f"  [dim]{escape(message)}[/dim]")

    def blank_line(self) -> None:
        """Print an empty line."""
        self.console.print()


reporter = CLIReporter()
