"""First-time setup: directories, git shims and the config file."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path

from rich.console import Console

from omnihook.core.config import (
    CONFIG_FILE,
    DEFAULT_HOOKS_DIR,
    GIT_HOOKS_DIR,
    OmnihookConfig,
    load_config,
    reset_config,
    save_config,
)
from omnihook.core.hooks.types import HookCategory, InstallError
from omnihook.core.shims import set_global_hooks_path, write_shim

logger = logging.getLogger(__name__)

DEFAULT_SHIM_CATEGORIES = (HookCategory.PRE_COMMIT, HookCategory.COMMIT_MSG)


def configure(
    *,
    reset: bool = False,
    config_path: Path | None = None,
    hooks_dir: Path | None = None,
    git_hooks_dir: Path | None = None,
    categories: Iterable[HookCategory | str] = DEFAULT_SHIM_CATEGORIES,
    git: str = "git",
    console: Console | None = None,
) -> OmnihookConfig:
    """Set omnihook up as the global git hook manager.

    Creates the hooks directory and the shim directory, points git's
    global core.hooksPath at the shims and saves the hooks directory to
    the config file. Running it again is harmless.
    """
    con = console or Console()
    path = config_path or CONFIG_FILE

    if reset:
        reset_config(path)
        con.print("Omnihook configuration reset.")

    config = load_config(config_path=path)
    hooks_dir = hooks_dir or config.hooks_dir or DEFAULT_HOOKS_DIR
    git_hooks_dir = git_hooks_dir or GIT_HOOKS_DIR

    for directory in (path.parent, hooks_dir, git_hooks_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallError(f"failed to create directory {directory}: {e}") from e

    set_global_hooks_path(git_hooks_dir, git=git)
    for category in categories:
        write_shim(git_hooks_dir, category)

    config = config.model_copy(update={"omni_hooks_dir": hooks_dir})
    save_config(config, path)
    logger.info(f"Configured hooks directory {hooks_dir}")
    con.print("Omnihook configured successfully.")
    return config
