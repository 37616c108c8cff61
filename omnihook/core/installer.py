"""Installing, removing and toggling hooks under the hooks root.

Enabling and disabling is a rename between ``<id>`` and
``<id>.disabled``; the run engine never looks at anything else.
"""

from __future__ import annotations

import logging
from pathlib import Path
import shutil
import subprocess
import tempfile

from omnihook.core.cache import SourceCache
from omnihook.core.definitions import (
    DEFINITION_FILENAMES,
    HookDefinition,
    load_definitions,
    render_script,
)
from omnihook.core.hooks.discovery import HOOKS_DIR_NOT_SET, HookDiscoverer
from omnihook.core.hooks.types import (
    DISABLED_SUFFIX,
    ConfigurationError,
    HookCategory,
    HookDescriptor,
    InstallError,
    RunScope,
)

logger = logging.getLogger(__name__)

HOOK_FILE_MODE = 0o755


class HookInstaller:
    """Manages hook files under a hooks root.

    Args:
        hooks_root: Directory holding one subdirectory per category.
        cache: Source cache that remote installs are recorded in.
        git: Git executable used to clone remote sources.
    """

    def __init__(
        self,
        hooks_root: Path | None,
        cache: SourceCache | None = None,
        git: str = "git",
    ) -> None:
        self.hooks_root = hooks_root
        self.cache = cache
        self.git = git

    def _root(self) -> Path:
        if self.hooks_root is None:
            raise ConfigurationError(HOOKS_DIR_NOT_SET)
        if not self.hooks_root.is_dir():
            raise ConfigurationError(
                f"hooks directory '{self.hooks_root}' does not exist. "
                "Run 'omnihook configure' to set it up"
            )
        return self.hooks_root

    @staticmethod
    def _check_target(category: str, hook_id: str | None = None) -> None:
        if category not in HookCategory:
            raise InstallError(f"unknown hook type '{category}'")
        if hook_id is not None and ("/" in hook_id or hook_id in ("", ".", "..")):
            raise InstallError(f"invalid hook id '{hook_id}'")

    def _hook_paths(self, category: str, hook_id: str) -> tuple[Path, Path]:
        self._check_target(category, hook_id)
        path = self._root() / category / hook_id
        return path, path.with_name(path.name + DISABLED_SUFFIX)

    def install(self, definitions: list[HookDefinition]) -> list[HookDescriptor]:
        """Write an executable for every definition.

        A hook that is currently disabled is updated in place and stays
        disabled.
        """
        installed = []
        for definition in definitions:
            path, disabled_path = self._hook_paths(definition.type.value, definition.id)
            target = disabled_path if disabled_path.exists() and not path.exists() else path
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(render_script(definition), encoding="utf-8")
                target.chmod(HOOK_FILE_MODE)
            except OSError as e:
                raise InstallError(f"failed to write hook file: {e}") from e
            logger.info(f"Installed hook {definition.type.value}/{definition.id}")
            installed.append(HookDescriptor.from_path(target))
        return installed

    def install_from_file(self, file_path: Path) -> list[HookDescriptor]:
        self._root()
        return self.install(load_definitions(file_path))

    def install_from_url(self, url: str) -> list[HookDescriptor]:
        """Clone a repository and install every hook definition in it."""
        self._root()
        installed = self.install(self.fetch_definitions(url))
        if self.cache is not None:
            self.cache.add(url)
        return installed

    def fetch_definitions(self, url: str) -> list[HookDefinition]:
        with tempfile.TemporaryDirectory(prefix="omnihook-clone-") as temp_dir:
            try:
                completed = subprocess.run(
                    [self.git, "clone", "--depth", "1", url, temp_dir],
                    capture_output=True,
                    text=True,
                    check=False,
                )
            except OSError as e:
                raise InstallError(f"failed to run git: {e}") from e
            if completed.returncode != 0:
                output = (completed.stdout + completed.stderr).strip()
                raise InstallError(f"failed to clone repository: {output}")

            definitions: list[HookDefinition] = []
            clone = Path(temp_dir)
            for candidate in sorted(clone.rglob("*")):
                if ".git" in candidate.relative_to(clone).parts:
                    continue
                if candidate.is_file() and candidate.name in DEFINITION_FILENAMES:
                    definitions.extend(load_definitions(candidate))

        if not definitions:
            raise InstallError("no valid hook configurations found in repository")
        return definitions

    def uninstall(self, category: str, hook_id: str) -> Path:
        """Remove one hook, whether enabled or disabled."""
        path, disabled_path = self._hook_paths(category, hook_id)
        if path.exists():
            target = path
        elif disabled_path.exists():
            target = disabled_path
        else:
            raise InstallError(f"hook '{hook_id}' of type '{category}' not found")
        try:
            target.unlink()
        except OSError as e:
            raise InstallError(f"failed to remove hook '{hook_id}': {e}") from e
        return target

    def uninstall_category(self, category: str) -> Path:
        self._check_target(category)
        category_dir = self._root() / category
        if not category_dir.is_dir():
            raise InstallError(f"hook type directory '{category}' not found")
        try:
            shutil.rmtree(category_dir)
        except OSError as e:
            raise InstallError(
                f"failed to remove hook type directory '{category}': {e}"
            ) from e
        return category_dir

    def uninstall_all(self) -> list[str]:
        """Remove everything under the hooks root. Returns removed names."""
        removed = []
        failed = []
        for entry in sorted(self._root().iterdir()):
            try:
                if entry.is_dir():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as e:
                logger.error(f"Failed to remove hook '{entry.name}': {e}")
                failed.append(entry.name)
                continue
            removed.append(entry.name)
        if failed:
            raise InstallError(f"failed to remove: {', '.join(failed)}")
        return removed

    def enable(self, category: str, hook_id: str) -> bool:
        """Rename a disabled hook back. False if it was already enabled."""
        path, disabled_path = self._hook_paths(category, hook_id)
        if not disabled_path.exists():
            if path.exists():
                return False
            raise InstallError(f"hook '{hook_id}' does not exist")
        try:
            disabled_path.rename(path)
        except OSError as e:
            raise InstallError(f"failed to enable hook '{hook_id}': {e}") from e
        return True

    def disable(self, category: str, hook_id: str) -> bool:
        """Add the disabled suffix to a hook. False if already disabled."""
        path, disabled_path = self._hook_paths(category, hook_id)
        if disabled_path.exists():
            return False
        if not path.exists():
            raise InstallError(f"hook '{hook_id}' not found")
        try:
            path.rename(disabled_path)
        except OSError as e:
            raise InstallError(f"failed to disable hook '{hook_id}': {e}") from e
        return True

    def list_hooks(self, category: str | None = None) -> list[HookDescriptor]:
        """Every installed hook, enabled and disabled."""
        scope = RunScope.for_category(category) if category else RunScope.all()
        return HookDiscoverer(self._root()).scan(scope)
