"""Tests for installing, removing and toggling hooks."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from omnihook.core.cache import SourceCache
from omnihook.core.definitions import HookDefinition
from omnihook.core.hooks.types import ConfigurationError, InstallError
from omnihook.core.installer import HookInstaller

MANIFEST = """
hooks:
  - id: no-todos
    name: No TODOs
    description: Reject staged TODOs
    script: exit 0
  - id: conventional
    name: Conventional commits
    description: Check the commit message
    type: commit-msg
    script: exit 0
"""


def _definition(hook_id: str = "lint", **kwargs) -> HookDefinition:
    kwargs.setdefault("script", "exit 0")
    return HookDefinition(id=hook_id, name=hook_id.title(), description="d", **kwargs)


@pytest.fixture()
def fake_git(tmp_path: Path) -> str:
    """A git stand-in whose clone copies a local directory."""
    script = tmp_path / "fake-git"
    script.write_text('#!/bin/sh\n[ -d "$4" ] || { echo "no such repo" >&2; exit 128; }\ncp -R "$4"/. "$5"\n')
    script.chmod(0o755)
    return str(script)


class TestInstall:
    def test_writes_executable_per_category(self, hooks_root: Path) -> None:
        installer = HookInstaller(hooks_root)

        installed = installer.install(
            [_definition("lint"), _definition("conventional", type="commit-msg")]
        )

        assert [h.key for h in installed] == ["pre-commit/lint", "commit-msg/conventional"]
        path = hooks_root / "pre-commit" / "lint"
        assert path.read_text().startswith("#!/bin/sh\n")
        assert os.access(path, os.X_OK)

    def test_reinstall_keeps_disabled_state(self, hooks_root: Path, make_hook) -> None:
        make_hook("pre-commit", "lint", "exit 1", disabled=True)

        installed = HookInstaller(hooks_root).install([_definition("lint")])

        assert installed[0].enabled is False
        assert not (hooks_root / "pre-commit" / "lint").exists()
        assert "exit 0" in (hooks_root / "pre-commit" / "lint.disabled").read_text()

    def test_from_file(self, hooks_root: Path, tmp_path: Path) -> None:
        path = tmp_path / "hooks.yml"
        path.write_text(MANIFEST)

        installed = HookInstaller(hooks_root).install_from_file(path)

        assert {h.key for h in installed} == {"pre-commit/no-todos", "commit-msg/conventional"}

    def test_unset_root(self) -> None:
        with pytest.raises(ConfigurationError, match="not set"):
            HookInstaller(None).install_from_file(Path("hooks.yml"))

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="does not exist"):
            HookInstaller(tmp_path / "nope").list_hooks()


class TestInstallFromUrl:
    def test_clones_and_records_source(
        self, hooks_root: Path, tmp_path: Path, fake_git: str
    ) -> None:
        repo = tmp_path / "repo"
        (repo / "nested").mkdir(parents=True)
        (repo / "nested" / "hook.yml").write_text(MANIFEST)
        (repo / "README.md").write_text("not a hook")
        cache = SourceCache(tmp_path / "cache.yaml")

        installed = HookInstaller(hooks_root, cache=cache, git=fake_git).install_from_url(
            str(repo)
        )

        assert len(installed) == 2
        assert yaml.safe_load((tmp_path / "cache.yaml").read_text()) == {
            "sources": [str(repo)]
        }

    def test_repository_without_definitions(
        self, hooks_root: Path, tmp_path: Path, fake_git: str
    ) -> None:
        repo = tmp_path / "repo"
        repo.mkdir()
        (repo / "README.md").write_text("nothing here")

        with pytest.raises(InstallError, match="no valid hook configurations"):
            HookInstaller(hooks_root, git=fake_git).install_from_url(str(repo))

    def test_clone_failure(self, hooks_root: Path, tmp_path: Path, fake_git: str) -> None:
        with pytest.raises(InstallError, match="failed to clone repository: no such repo"):
            HookInstaller(hooks_root, git=fake_git).install_from_url(str(tmp_path / "missing"))

    def test_missing_git(self, hooks_root: Path, tmp_path: Path) -> None:
        installer = HookInstaller(hooks_root, git=str(tmp_path / "no-git"))
        with pytest.raises(InstallError, match="failed to run git"):
            installer.install_from_url("https://example.invalid/hooks.git")


class TestUninstall:
    def test_single_hook(self, hooks_root: Path, make_hook) -> None:
        path = make_hook("pre-commit", "lint")

        assert HookInstaller(hooks_root).uninstall("pre-commit", "lint") == path
        assert not path.exists()

    def test_disabled_hook(self, hooks_root: Path, make_hook) -> None:
        path = make_hook("pre-commit", "lint", disabled=True)

        HookInstaller(hooks_root).uninstall("pre-commit", "lint")

        assert not path.exists()

    def test_unknown_hook(self, hooks_root: Path) -> None:
        with pytest.raises(InstallError, match="hook 'lint' of type 'pre-commit' not found"):
            HookInstaller(hooks_root).uninstall("pre-commit", "lint")

    def test_category(self, hooks_root: Path, make_hook) -> None:
        make_hook("pre-commit", "lint")
        make_hook("pre-push", "tests")
        installer = HookInstaller(hooks_root)

        installer.uninstall_category("pre-commit")

        assert not (hooks_root / "pre-commit").exists()
        assert (hooks_root / "pre-push" / "tests").exists()
        with pytest.raises(InstallError, match="hook type directory 'pre-commit' not found"):
            installer.uninstall_category("pre-commit")

    def test_all(self, hooks_root: Path, make_hook) -> None:
        make_hook("pre-commit", "lint")
        make_hook("pre-push", "tests")

        removed = HookInstaller(hooks_root).uninstall_all()

        assert removed == ["pre-commit", "pre-push"]
        assert list(hooks_root.iterdir()) == []

    @pytest.mark.parametrize("category", ["..", ".", "not-a-hook", ""])
    def test_category_must_be_a_hook_type(
        self, hooks_root: Path, make_hook, category: str
    ) -> None:
        make_hook("pre-commit", "lint")

        with pytest.raises(InstallError, match="unknown hook type"):
            HookInstaller(hooks_root).uninstall_category(category)
        assert (hooks_root / "pre-commit" / "lint").exists()

    @pytest.mark.parametrize("hook_id", ["..", "../pre-push", "a/b"])
    def test_id_must_be_a_plain_name(self, hooks_root: Path, hook_id: str) -> None:
        installer = HookInstaller(hooks_root)
        with pytest.raises(InstallError, match="invalid hook id"):
            installer.uninstall("pre-commit", hook_id)
        with pytest.raises(InstallError, match="invalid hook id"):
            installer.disable("pre-commit", hook_id)


class TestToggle:
    def test_disable_then_enable(self, hooks_root: Path, make_hook) -> None:
        make_hook("pre-commit", "lint")
        installer = HookInstaller(hooks_root)

        assert installer.disable("pre-commit", "lint") is True
        assert (hooks_root / "pre-commit" / "lint.disabled").exists()
        assert installer.disable("pre-commit", "lint") is False

        assert installer.enable("pre-commit", "lint") is True
        assert (hooks_root / "pre-commit" / "lint").exists()
        assert installer.enable("pre-commit", "lint") is False

    def test_missing_hook(self, hooks_root: Path) -> None:
        installer = HookInstaller(hooks_root)
        with pytest.raises(InstallError, match="does not exist"):
            installer.enable("pre-commit", "lint")
        with pytest.raises(InstallError, match="not found"):
            installer.disable("pre-commit", "lint")


def test_list_hooks_includes_disabled(hooks_root: Path, make_hook) -> None:
    make_hook("pre-commit", "lint")
    make_hook("pre-commit", "slow", disabled=True)
    make_hook("pre-push", "tests")
    installer = HookInstaller(hooks_root)

    listed = installer.list_hooks()
    assert {(h.key, h.enabled) for h in listed} == {
        ("pre-commit/lint", True),
        ("pre-commit/slow", False),
        ("pre-push/tests", True),
    }
    assert [h.name for h in installer.list_hooks("pre-push")] == ["tests"]


class TestSourceCache:
    def test_add_deduplicates(self, tmp_path: Path) -> None:
        cache = SourceCache(tmp_path / "cache.yaml")

        assert cache.add("https://a") is True
        assert cache.add("https://a") is False
        assert cache.add("https://b") is True
        assert SourceCache(tmp_path / "cache.yaml").sources == ["https://a", "https://b"]

    def test_unreadable_cache_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.yaml"
        path.write_text("sources: [unclosed")
        assert SourceCache(path).sources == []
