"""Hook run manager.

Provides the high-level API the CLI uses to run one scope of hooks:
discover, execute with progress, then aggregate.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from omnihook.core.hooks.aggregator import ResultAggregator
from omnihook.core.hooks.discovery import HookDiscoverer
from omnihook.core.hooks.executor import execute_hooks_parallel
from omnihook.core.hooks.progress import ProgressReporter
from omnihook.core.hooks.types import RunReport, RunRequest

if TYPE_CHECKING:
    from omnihook.core.config import OmnihookConfig

logger = logging.getLogger(__name__)

NO_ACTIVE_HOOKS = "No active hooks found."


class HookRunManager:
    """Runs the hooks selected by a run request and reports the verdict.

    The hooks root comes from the configuration given at construction;
    nothing is looked up globally during a run.
    """

    def __init__(
        self,
        config: OmnihookConfig,
        console: Console | None = None,
        show_progress: bool = True,
        cwd: str | Path | None = None,
    ) -> None:
        self.config = config
        self.console = console or Console()
        self.show_progress = show_progress
        self.cwd = cwd
        self.discoverer = HookDiscoverer(config.hooks_dir)
        self.aggregator = ResultAggregator(self.console)

    async def run(self, request: RunRequest) -> RunReport:
        """Run every active hook in the request's scope.

        Raises:
            ConfigurationError: The hooks root is unset or unreadable.
            DiscoveryError: The hooks root could not be enumerated.
        """
        hooks = self.discoverer.discover(request.scope)
        if not hooks:
            self.console.print(NO_ACTIVE_HOOKS)
            return RunReport()

        reporter = ProgressReporter(self.console, enabled=self.show_progress)
        reporter.initialize(hooks)
        with reporter:
            results = await execute_hooks_parallel(
                hooks,
                request.commit_message,
                max_concurrency=self.config.max_concurrency,
                timeout=self.config.hook_timeout,
                cwd=self.cwd,
                reporter=reporter,
            )

        failure_count = self.aggregator.report(results, discovered=hooks)
        logger.info(
            f"Ran {len(results)} hooks for {request.scope.describe()}, "
            f"{failure_count} failed"
        )
        return RunReport(discovered=hooks, results=results, failure_count=failure_count)

    def run_sync(self, request: RunRequest) -> RunReport:
        return asyncio.run(self.run(request))
