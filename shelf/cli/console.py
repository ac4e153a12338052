"""Console output for the CLI, wrapping rich."""

from typing import Any

from rich.console import Console as RichConsole


class Console:
    """CLI output manager: success/error lines on stdout/stderr."""

    def __init__(self, *, quiet: bool = False) -> None:
        self._console = RichConsole(quiet=quiet)
        self._err_console = RichConsole(stderr=True)

    def success(self, message: str) -> None:
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)


_console: Console | None = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console()
    return _console
