"""Hook executor module.

Runs hook executables as child processes, capturing their combined
stdout/stderr and classifying each run by exit status.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path
import signal
import time

from omnihook.core.hooks.progress import ProgressReporter
from omnihook.core.hooks.types import ExecutionResult, HookDescriptor, HookOutcome

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_HOOK_TIMEOUT = 300.0

_READ_CHUNK = 64 * 1024
# Bound on reading what a killed hook left in the pipe
_DRAIN_TIMEOUT = 1.0


def build_hook_args(hook: HookDescriptor, commit_message: str | None) -> list[str]:
    """Only commit-msg hooks get an argument: the commit message text."""
    if hook.is_message_validation and commit_message:
        return [commit_message]
    return []


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


def _failure(
    hook: HookDescriptor,
    error: str,
    execution_time: float,
    timed_out: bool = False,
    output: str | None = None,
) -> ExecutionResult:
    return ExecutionResult(
        name=hook.name,
        category=hook.category,
        outcome=HookOutcome.FAILURE,
        captured_output=error if output is None else output,
        exit_code=-1,
        execution_time=execution_time,
        error=error,
        timed_out=timed_out,
    )


async def _kill(process: asyncio.subprocess.Process) -> None:
    # Hooks run in their own session so grandchildren holding the output
    # pipe are killed along with the hook itself.
    with contextlib.suppress(ProcessLookupError):
        if hasattr(os, "killpg"):
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    await process.wait()


async def _drain(process: asyncio.subprocess.Process) -> bytes:
    """Read whatever output is still buffered after the hook was killed."""
    if process.stdout is None:
        return b""
    try:
        return await asyncio.wait_for(process.stdout.read(), timeout=_DRAIN_TIMEOUT)
    except TimeoutError:
        return b""


async def execute_hook(
    hook: HookDescriptor,
    commit_message: str | None = None,
    timeout: float = DEFAULT_HOOK_TIMEOUT,
    cwd: str | Path | None = None,
    reporter: ProgressReporter | None = None,
) -> ExecutionResult:
    """Execute a single hook.

    Args:
        hook: The hook to run.
        commit_message: Message text, passed only to commit-msg hooks.
        timeout: Seconds to wait before the hook is killed.
        cwd: Working directory for the hook process.
        reporter: Progress reporter to notify on spawn and exit.

    Returns:
        ExecutionResult describing the run.
    """
    start_time = time.perf_counter()
    args = build_hook_args(hook, commit_message)

    try:
        process = await asyncio.create_subprocess_exec(
            str(hook.path),
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=cwd,
            start_new_session=True,
        )
    except OSError as e:
        logger.error(f"Error spawning hook '{hook.key}': {e}")
        result = _failure(hook, str(e), time.perf_counter() - start_time)
        if reporter:
            reporter.finish(hook.key, ok=False)
        return result

    if reporter:
        reporter.start(hook.key)

    chunks: list[bytes] = []

    async def collect() -> None:
        assert process.stdout is not None
        while chunk := await process.stdout.read(_READ_CHUNK):
            chunks.append(chunk)
        await process.wait()

    try:
        await asyncio.wait_for(collect(), timeout=timeout)
    except TimeoutError:
        await _kill(process)
        chunks.append(await _drain(process))
        logger.warning(f"Hook '{hook.key}' timed out after {timeout}s")
        result = _failure(
            hook,
            f"Hook timed out after {timeout}s",
            time.perf_counter() - start_time,
            timed_out=True,
            output=_decode(chunks),
        )
        if reporter:
            reporter.finish(hook.key, ok=False)
        return result
    except asyncio.CancelledError:
        # The hook is in its own session, so nothing else will stop it
        await _kill(process)
        raise

    output = _decode(chunks)
    exit_code = process.returncode if process.returncode is not None else -1
    execution_time = time.perf_counter() - start_time

    if exit_code != 0:
        logger.info(f"Hook '{hook.key}' exited with code {exit_code}")
        outcome = HookOutcome.FAILURE
    else:
        logger.debug(f"Hook '{hook.key}' passed in {execution_time:.2f}s")
        outcome = HookOutcome.SUCCESS

    if reporter:
        reporter.finish(hook.key, ok=outcome == HookOutcome.SUCCESS)

    return ExecutionResult(
        name=hook.name,
        category=hook.category,
        outcome=outcome,
        captured_output=output,
        exit_code=exit_code,
        execution_time=execution_time,
    )


async def execute_hooks_parallel(
    hooks: list[HookDescriptor],
    commit_message: str | None = None,
    *,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    timeout: float = DEFAULT_HOOK_TIMEOUT,
    cwd: str | Path | None = None,
    reporter: ProgressReporter | None = None,
) -> list[ExecutionResult]:
    """Execute hooks concurrently through a bounded pool of workers.

    Hooks are fed to the workers through a queue. Every hook produces
    exactly one result, even when running it raised, and all workers
    finish before any result is returned.

    Args:
        hooks: Hooks to execute.
        commit_message: Message text for commit-msg hooks.
        max_concurrency: Number of hooks allowed to run at once. Zero or
            less runs every hook at the same time.
        timeout: Per-hook deadline in seconds.
        cwd: Working directory for the hook processes.
        reporter: Progress reporter shared by all workers.

    Returns:
        One ExecutionResult per hook, in completion order.
    """
    if not hooks:
        return []

    pending: asyncio.Queue[HookDescriptor] = asyncio.Queue()
    for hook in hooks:
        pending.put_nowait(hook)
    completed: asyncio.Queue[ExecutionResult] = asyncio.Queue(maxsize=len(hooks))

    if max_concurrency <= 0:
        worker_count = len(hooks)
    else:
        worker_count = min(max_concurrency, len(hooks))

    async def worker() -> None:
        while True:
            try:
                hook = pending.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                result = await execute_hook(
                    hook, commit_message, timeout=timeout, cwd=cwd, reporter=reporter
                )
            except Exception as e:
                logger.error(f"Hook execution failed: {e}")
                result = _failure(hook, str(e), 0.0)
                if reporter:
                    reporter.finish(hook.key, ok=False)
            completed.put_nowait(result)

    logger.debug(f"Running {len(hooks)} hooks with {worker_count} workers")
    await asyncio.gather(*(worker() for _ in range(worker_count)))

    results: list[ExecutionResult] = []
    while not completed.empty():
        results.append(completed.get_nowait())
    return results
