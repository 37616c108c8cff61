"""Type definitions for the hook engine.

Hooks are executables installed under the hooks root, grouped into one
subdirectory per git lifecycle event:

    <hooks_root>/<category>/<name>            enabled
    <hooks_root>/<category>/<name>.disabled   disabled
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DISABLED_SUFFIX = ".disabled"

SUCCESS_GLYPH = "✅"
FAILURE_GLYPH = "❌"


class HookCategory(StrEnum):
    """Git client-side hook names a managed hook can be bound to."""

    APPLYPATCH_MSG = "applypatch-msg"
    PRE_APPLYPATCH = "pre-applypatch"
    POST_APPLYPATCH = "post-applypatch"
    PRE_COMMIT = "pre-commit"
    PRE_MERGE_COMMIT = "pre-merge-commit"
    PREPARE_COMMIT_MSG = "prepare-commit-msg"
    COMMIT_MSG = "commit-msg"
    POST_COMMIT = "post-commit"
    PRE_REBASE = "pre-rebase"
    POST_CHECKOUT = "post-checkout"
    POST_MERGE = "post-merge"
    PRE_PUSH = "pre-push"
    POST_REWRITE = "post-rewrite"


# The only category whose hooks receive the commit message as an argument
MESSAGE_VALIDATION_CATEGORY = HookCategory.COMMIT_MSG.value


class HookOutcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class ProgressPhase(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"


class HookDescriptor(BaseModel):
    """One executable hook found under the hooks root.

    Attributes:
        name: Hook name, unique within its category. Never carries the
            disabled suffix.
        category: The lifecycle event directory the hook lives in.
        path: Filesystem location of the executable.
        enabled: False when the file name carries the disabled suffix.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    path: Path
    enabled: bool = True

    @classmethod
    def from_path(cls, path: Path) -> HookDescriptor:
        filename = path.name
        enabled = not filename.endswith(DISABLED_SUFFIX)
        name = filename if enabled else filename[: -len(DISABLED_SUFFIX)]
        return cls(name=name, category=path.parent.name, path=path, enabled=enabled)

    @property
    def is_message_validation(self) -> bool:
        return self.category == MESSAGE_VALIDATION_CATEGORY

    @property
    def key(self) -> str:
        """Identifier used for progress rows, unique across categories."""
        return f"{self.category}/{self.name}"


class ExecutionResult(BaseModel):
    """Outcome of running a single hook.

    Attributes:
        name: Hook name.
        category: Hook category.
        outcome: Success when the process exited with status zero.
        captured_output: Combined stdout and stderr of the hook.
        exit_code: Process exit status, -1 on spawn failure or timeout.
        execution_time: Wall-clock seconds spent on the hook.
        error: Diagnostic for spawn failures and timeouts.
        timed_out: Whether the hook was killed at its deadline.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    outcome: HookOutcome
    captured_output: str = ""
    exit_code: int = 0
    execution_time: float = 0.0
    error: str | None = None
    timed_out: bool = False

    @property
    def key(self) -> str:
        return f"{self.category}/{self.name}"

    @property
    def succeeded(self) -> bool:
        return self.outcome == HookOutcome.SUCCESS

    @property
    def failed(self) -> bool:
        return self.outcome == HookOutcome.FAILURE


@dataclass
class ProgressState:
    """Status line of one hook, owned by the worker running that hook."""

    label: str
    phase: ProgressPhase = ProgressPhase.PENDING
    final_glyph: str | None = None


class RunScope(BaseModel):
    """Selects which hooks a run executes: every category or exactly one."""

    model_config = ConfigDict(frozen=True)

    category: str | None = Field(
        default=None, description="Category to run. None selects all categories."
    )

    @classmethod
    def all(cls) -> RunScope:
        return cls()

    @classmethod
    def for_category(cls, category: str) -> RunScope:
        if not category:
            raise ValueError("category must not be empty")
        return cls(category=category)

    @property
    def is_all(self) -> bool:
        return self.category is None

    def describe(self) -> str:
        return "all categories" if self.is_all else f"category '{self.category}'"


class RunRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    scope: RunScope
    commit_message: str | None = None


class RunReport(BaseModel):
    """Everything a run produced, handed back to the caller."""

    discovered: list[HookDescriptor] = Field(default_factory=list)
    results: list[ExecutionResult] = Field(default_factory=list)
    failure_count: int = 0

    @property
    def succeeded(self) -> bool:
        return self.failure_count == 0


class OmnihookError(Exception):
    """Base class for errors surfaced to the omnihook caller."""


class ConfigurationError(OmnihookError):
    """Raised when the hooks root is unset or cannot be read."""


class DiscoveryError(OmnihookError):
    """Raised when the hooks root cannot be enumerated."""


class HookDefinitionError(OmnihookError):
    """Raised when a hook definition file is malformed or invalid."""


class InstallError(OmnihookError):
    """Raised when installing, removing or toggling a hook fails."""
