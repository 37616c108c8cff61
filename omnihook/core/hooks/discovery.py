"""Hook discovery.

Resolves the active hooks for a run scope by walking the hooks root.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from omnihook.core.hooks.types import (
    ConfigurationError,
    DiscoveryError,
    HookDescriptor,
    RunScope,
)

logger = logging.getLogger(__name__)

HOOKS_DIR_NOT_SET = "hooks directory not set. Run 'omnihook configure' first"


class HookDiscoverer:
    """Finds enabled hook executables under a hooks root."""

    def __init__(self, hooks_root: Path | str | None) -> None:
        self.hooks_root = Path(hooks_root).expanduser() if hooks_root else None

    def _checked_root(self) -> Path:
        if self.hooks_root is None:
            raise ConfigurationError(HOOKS_DIR_NOT_SET)
        root = self.hooks_root
        if not root.is_dir():
            raise ConfigurationError(
                f"hooks directory '{root}' does not exist. "
                "Run 'omnihook configure' to set it up"
            )
        if not os.access(root, os.R_OK | os.X_OK):
            raise ConfigurationError(f"hooks directory '{root}' is not readable")
        return root

    def category_dirs(self, scope: RunScope) -> list[Path]:
        """Return the category directories selected by the scope."""
        root = self._checked_root()
        if not scope.is_all:
            category_dir = root / str(scope.category)
            return [category_dir] if category_dir.is_dir() else []
        try:
            return sorted(entry for entry in root.iterdir() if entry.is_dir())
        except OSError as e:
            raise DiscoveryError(f"failed to list hooks: {e}") from e

    def scan(self, scope: RunScope) -> list[HookDescriptor]:
        """Return every hook file in scope, enabled or not."""
        descriptors: list[HookDescriptor] = []
        for category_dir in self.category_dirs(scope):
            try:
                entries = sorted(category_dir.iterdir())
            except OSError as e:
                raise DiscoveryError(f"failed to list hooks: {e}") from e
            for entry in entries:
                if entry.is_dir():
                    continue
                descriptors.append(HookDescriptor.from_path(entry))
        return descriptors

    def discover(self, scope: RunScope) -> list[HookDescriptor]:
        """Return the active hooks for a scope, in discovery order.

        Disabled hooks are skipped silently, as are directories.

        Raises:
            ConfigurationError: The hooks root is unset or unreadable.
            DiscoveryError: A category directory could not be listed.
        """
        active = []
        for hook in self.scan(scope):
            if not hook.enabled:
                logger.debug(f"Skipping disabled hook: {hook.key}")
                continue
            active.append(hook)

        logger.info(f"Discovered {len(active)} active hooks for {scope.describe()}")
        return active
