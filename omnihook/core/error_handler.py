"""Omnihook Error Handler
=======================

Consistent error and warning display using Rich formatting.

Usage:
    from omnihook.core.error_handler import ErrorHandler

    try:
        installer.install_from_file(path)
    except OmnihookError as e:
        ErrorHandler.display_error(e, context="Install")
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.traceback import Traceback

# Errors go to stderr so hook output on stdout stays clean
_console = Console(stderr=True)

COLORS = {
    "error": "#FF4444",
    "warning": "#FFB800",
    "info": "#00D26A",
    "muted": "#666666",
}


class ErrorHandler:
    """Rich error, warning and info panels shared by every command."""

    @staticmethod
    def display_error(
        error: Exception,
        context: str = "Operation",
        show_traceback: bool = False,
        console: Console | None = None,
    ) -> None:
        """Display a formatted error panel.

        Args:
            error: The exception that occurred
            context: What was happening (e.g., "Run", "Install")
            show_traceback: Whether to show the full traceback
            console: Optional custom console (uses stderr if not provided)
        """
        con = console or _console

        content = Text()
        content.append(f"{type(error).__name__}\n", style=f"bold {COLORS['error']}")
        content.append(str(error), style=COLORS["muted"])

        error_panel = Panel(
            content,
            title=f"[{COLORS['error']}]❌ {context} Failed[/{COLORS['error']}]",
            border_style=COLORS["error"],
            padding=(1, 2),
        )
        con.print()
        con.print(error_panel)

        if show_traceback and error.__traceback__:
            con.print()
            con.print(
                Traceback.from_exception(
                    type(error),
                    error,
                    error.__traceback__,
                    show_locals=False,
                    max_frames=10,
                )
            )

    @staticmethod
    def display_warning(
        message: str, context: str = "Warning", console: Console | None = None
    ) -> None:
        con = console or _console

        warning_panel = Panel(
            Text(message, style=COLORS["muted"]),
            title=f"[{COLORS['warning']}]⚠️  {context}[/{COLORS['warning']}]",
            border_style=COLORS["warning"],
            padding=(0, 2),
        )
        con.print()
        con.print(warning_panel)
