"""Per-hook progress display.

Each active hook gets one status row that moves through
pending -> running -> done. Transitions are driven by the executor when
the child process is spawned and when it exits; the spinner shown while a
hook is running is purely cosmetic.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from types import TracebackType

from rich.console import Console, RenderableType
from rich.progress import Progress, ProgressColumn, Task, TaskID, TextColumn
from rich.spinner import Spinner
from rich.text import Text

from omnihook.core.hooks.types import (
    FAILURE_GLYPH,
    SUCCESS_GLYPH,
    HookDescriptor,
    ProgressPhase,
    ProgressState,
)

logger = logging.getLogger(__name__)

_console = Console(stderr=True)


class PhaseColumn(ProgressColumn):
    """Renders a dot while pending, a spinner while running, then the glyph."""

    def __init__(self, spinner_name: str = "dots") -> None:
        self.spinner = Spinner(spinner_name, style="progress.spinner")
        super().__init__()

    def render(self, task: Task) -> RenderableType:
        phase = task.fields.get("phase", ProgressPhase.PENDING)
        if phase == ProgressPhase.DONE:
            return Text(task.fields.get("glyph") or "")
        if phase == ProgressPhase.RUNNING:
            return self.spinner.render(task.get_time())
        return Text("·", style="dim")


class ProgressReporter:
    """Tracks and draws one status row per hook.

    Rows are keyed by ``HookDescriptor.key``. Every worker only ever
    writes the row of the hook it is running.
    """

    def __init__(self, console: Console | None = None, enabled: bool = True) -> None:
        self.console = console or _console
        self.enabled = enabled
        self._states: dict[str, ProgressState] = {}
        self._task_ids: dict[str, TaskID] = {}
        self._progress = Progress(
            TextColumn("{task.description}"),
            PhaseColumn(),
            console=self.console,
            disable=not enabled,
        )

    def __enter__(self) -> ProgressReporter:
        if self.enabled:
            self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.enabled:
            self._progress.stop()

    @property
    def states(self) -> dict[str, ProgressState]:
        return dict(self._states)

    def state(self, key: str) -> ProgressState:
        return self._states[key]

    def initialize(self, hooks: Iterable[HookDescriptor]) -> None:
        """Create a pending row for every hook before any of them runs."""
        hooks = list(hooks)
        width = max((len(hook.name) for hook in hooks), default=0)
        for hook in hooks:
            label = f"🪝 {hook.name:<{width}}"
            self._states[hook.key] = ProgressState(label=label)
            self._task_ids[hook.key] = self._progress.add_task(
                label, total=1, phase=ProgressPhase.PENDING, glyph=None
            )

    def start(self, key: str) -> None:
        state = self._states.get(key)
        if state is None:
            logger.debug(f"No progress row for hook {key}")
            return
        state.phase = ProgressPhase.RUNNING
        self._progress.update(self._task_ids[key], phase=ProgressPhase.RUNNING)

    def finish(self, key: str, ok: bool) -> None:
        state = self._states.get(key)
        if state is None:
            logger.debug(f"No progress row for hook {key}")
            return
        state.phase = ProgressPhase.DONE
        state.final_glyph = SUCCESS_GLYPH if ok else FAILURE_GLYPH
        self._progress.update(
            self._task_ids[key],
            completed=1,
            phase=ProgressPhase.DONE,
            glyph=state.final_glyph,
        )
