"""Parallel hook execution engine for omnihook.

Hooks are executables installed under the hooks root, one subdirectory
per git lifecycle event:

    ~/.omnihook/hooks/
        pre-commit/
            lint
            format
            slow-check.disabled
        commit-msg/
            conventional-commits

A run discovers the enabled hooks of one category (or of all of them),
executes them concurrently, shows a status row per hook and prints a
failure block for every hook that exited non-zero. The run fails when
any hook failed.

commit-msg hooks receive the commit message text as their only argument;
every other hook is invoked with no arguments.
"""
from __future__ import annotations

from omnihook.core.hooks.aggregator import ResultAggregator
from omnihook.core.hooks.discovery import HookDiscoverer
from omnihook.core.hooks.executor import execute_hook, execute_hooks_parallel
from omnihook.core.hooks.manager import HookRunManager
from omnihook.core.hooks.progress import ProgressReporter
from omnihook.core.hooks.types import (
    DISABLED_SUFFIX,
    MESSAGE_VALIDATION_CATEGORY,
    ConfigurationError,
    DiscoveryError,
    ExecutionResult,
    HookCategory,
    HookDefinitionError,
    HookDescriptor,
    HookOutcome,
    InstallError,
    OmnihookError,
    ProgressPhase,
    ProgressState,
    RunReport,
    RunRequest,
    RunScope,
)

__all__ = [
    "DISABLED_SUFFIX",
    "MESSAGE_VALIDATION_CATEGORY",
    "ConfigurationError",
    "DiscoveryError",
    "ExecutionResult",
    "HookCategory",
    "HookDefinitionError",
    "HookDescriptor",
    "HookDiscoverer",
    "HookOutcome",
    "HookRunManager",
    "InstallError",
    "OmnihookError",
    "ProgressPhase",
    "ProgressReporter",
    "ProgressState",
    "ResultAggregator",
    "RunReport",
    "RunRequest",
    "RunScope",
    "execute_hook",
    "execute_hooks_parallel",
]
