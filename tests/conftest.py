from __future__ import annotations

from collections.abc import Callable
import io
from pathlib import Path

import pytest
from rich.console import Console

from omnihook.core.hooks.types import DISABLED_SUFFIX

MakeHook = Callable[..., Path]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OMNI_HOOKS_DIR",
        "OMNIHOOK_HOOKS_DIR",
        "OMNIHOOK_MAX_CONCURRENCY",
        "OMNIHOOK_HOOK_TIMEOUT",
        "OMNIHOOK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def hooks_root(tmp_path: Path) -> Path:
    root = tmp_path / "hooks"
    root.mkdir()
    return root


@pytest.fixture()
def make_hook(hooks_root: Path) -> MakeHook:
    """Write an executable shell hook under the hooks root."""

    def _make(
        category: str, name: str, body: str = "exit 0", disabled: bool = False
    ) -> Path:
        directory = hooks_root / category
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / (name + DISABLED_SUFFIX if disabled else name)
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture()
def console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)
