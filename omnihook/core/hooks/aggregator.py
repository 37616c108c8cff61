"""Failure reporting and the aggregate verdict of a run."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape

from omnihook.core.hooks.types import ExecutionResult, HookDescriptor

_console = Console()


def order_by_discovery(
    results: Sequence[ExecutionResult], discovered: Sequence[HookDescriptor]
) -> list[ExecutionResult]:
    """Sort results into discovery order. Unknown hooks go last."""
    position = {hook.key: index for index, hook in enumerate(discovered)}
    return sorted(results, key=lambda r: position.get(r.key, len(position)))


class ResultAggregator:
    """Prints one block per failed hook and decides the run's verdict."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or _console

    @staticmethod
    def failures(results: Sequence[ExecutionResult]) -> list[ExecutionResult]:
        return [result for result in results if result.failed]

    @staticmethod
    def verdict(results: Sequence[ExecutionResult]) -> bool:
        """True when every hook passed."""
        return not any(result.failed for result in results)

    def print_failure(self, result: ExecutionResult) -> None:
        body = result.captured_output.rstrip("\n")
        if result.timed_out and result.error:
            body = f"{body}\n{result.error}" if body else result.error
        body = body or result.error or ""
        self.console.print()
        self.console.print(f"🚧 [bold]{escape(result.name)}[/bold] check failed:")
        self.console.print(f"[red]{escape(body)}[/red]")
        self.console.print()

    def report(
        self,
        results: Sequence[ExecutionResult],
        discovered: Sequence[HookDescriptor] | None = None,
    ) -> int:
        """Print a block for each failure and return the failure count.

        Blocks follow discovery order when ``discovered`` is given,
        otherwise the order results arrived in.
        """
        failed = self.failures(results)
        if discovered is not None:
            failed = order_by_discovery(failed, discovered)
        for result in failed:
            self.print_failure(result)
        return len(failed)
