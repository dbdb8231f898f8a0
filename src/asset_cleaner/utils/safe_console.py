"""Terminal-safe Console wrapper for the Rich library.

Wraps Rich's Console to sanitize Unicode icons on terminals that don't
support UTF-8, and to honour --no-color / --quiet.
"""
from rich.console import Console
from typing import Any
from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console that sanitizes Unicode output for non-UTF-8 terminals.

    When ``quiet`` is set, informational output (header, progress) is
    suppressed while warnings, errors and the final summary still print.
    """

    def __init__(self, *args, quiet: bool = False, **kwargs):
        """Initialize SafeConsole with UTF-8 capability detection.

        Args:
            quiet: Suppress output sent through info()
            *args, **kwargs: Passed through to Rich's Console
        """
        self._needs_sanitization = not is_utf8_capable()
        self.quiet_mode = quiet

        if self._needs_sanitization:
            kwargs['legacy_windows'] = True

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with automatic Unicode sanitization.

        Args:
            *objects: Objects to print (same as Rich Console.print)
            **kwargs: Keyword arguments (same as Rich Console.print)
        """
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)

    def info(self, *objects: Any, **kwargs) -> None:
        """Print unless running in quiet mode."""
        if not self.quiet_mode:
            self.print(*objects, **kwargs)

    def success(self, message: str) -> None:
        self.print(f"  [green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        self.print(f"  [yellow]![/yellow] {message}")

    def error(self, message: str) -> None:
        self.print(f"[bold red]Error:[/bold red] {message}")
