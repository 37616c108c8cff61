"""Git-facing shim scripts.

omnihook points git's global ``core.hooksPath`` at a directory of small
shell shims. Each shim runs ``omnihook run`` for its category, aborts the
git operation when a managed hook failed, then chains to the
repository's own hook of the same name.
"""

from __future__ import annotations

import logging
from pathlib import Path
import subprocess

from omnihook.core.hooks.types import MESSAGE_VALIDATION_CATEGORY, HookCategory, InstallError

logger = logging.getLogger(__name__)

SHIM_FILE_MODE = 0o755

_SHIM_TEMPLATE = """#!/bin/sh
# Managed by omnihook. Runs the global {category} hooks, then the
# repository's own {category} hook if there is one.

if command -v omnihook >/dev/null 2>&1; then
    {run_command}
    if [ $? -ne 0 ]; then
        echo "OmniHook detected an issue. Aborting."
        exit 1
    fi
fi

local_hook="$(git rev-parse --git-dir 2>/dev/null)/hooks/{category}"
if [ -x "$local_hook" ]; then
    "$local_hook" "$@"
    if [ $? -ne 0 ]; then
        echo "Repo-local {category} hook failed. Aborting."
        exit 1
    fi
fi
"""


def render_shim(category: HookCategory | str) -> str:
    category = HookCategory(category).value
    run_command = f"omnihook run --type {category}"
    if category == MESSAGE_VALIDATION_CATEGORY:
        # git passes the path of the message file; hooks get the text
        run_command += ' --commit-msg "$(cat "$1")"'
    return _SHIM_TEMPLATE.format(category=category, run_command=run_command)


def write_shim(git_hooks_dir: Path, category: HookCategory | str) -> Path:
    """Write the shim for one category and make it executable."""
    path = git_hooks_dir / HookCategory(category).value
    try:
        git_hooks_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(render_shim(category), encoding="utf-8")
        path.chmod(SHIM_FILE_MODE)
    except OSError as e:
        raise InstallError(f"failed to write {path.name} shim: {e}") from e
    logger.debug(f"Wrote git shim {path}")
    return path


def set_global_hooks_path(git_hooks_dir: Path, git: str = "git") -> None:
    """Point git's global core.hooksPath at the shim directory."""
    try:
        completed = subprocess.run(
            [git, "config", "--global", "core.hooksPath", str(git_hooks_dir)],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise InstallError(f"failed to run git: {e}") from e
    if completed.returncode != 0:
        raise InstallError(
            f"failed to set git hooks path: {completed.stderr.strip()}"
        )
