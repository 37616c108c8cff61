"""Tests for hook definition files."""

from __future__ import annotations

from pathlib import Path

import pytest

from omnihook.core.definitions import (
    HookDefinition,
    load_definitions,
    parse_definitions,
    render_script,
)
from omnihook.core.hooks.types import HookCategory, HookDefinitionError

MANIFEST = """
hooks:
  - id: no-todos
    name: No TODOs
    description: Reject staged TODOs
    script: "! git diff --cached | grep -q TODO"
  - id: conventional
    name: Conventional commits
    description: Check the commit message format
    type: commit-msg
    script_path: /usr/local/bin/check-commit-msg
"""

SINGLE = """
id: lint
name: Lint
description: Run the linter
script: ruff check .
"""


class TestParseDefinitions:
    def test_manifest(self) -> None:
        definitions = parse_definitions(MANIFEST)

        assert [d.id for d in definitions] == ["no-todos", "conventional"]
        assert definitions[0].type == HookCategory.PRE_COMMIT
        assert definitions[1].type == HookCategory.COMMIT_MSG

    def test_single_hook_document(self) -> None:
        definitions = parse_definitions(SINGLE)

        assert len(definitions) == 1
        assert definitions[0].script == "ruff check ."

    @pytest.mark.parametrize("text", ["", "just text", "hooks: []", "- a\n- b"])
    def test_unrecognised_documents(self, text: str) -> None:
        with pytest.raises(HookDefinitionError, match="improperly formatted"):
            parse_definitions(text)

    def test_broken_yaml(self) -> None:
        with pytest.raises(HookDefinitionError, match="failed to parse YAML"):
            parse_definitions("hooks: [unclosed")

    def test_invalid_hook_names_its_id(self) -> None:
        with pytest.raises(HookDefinitionError, match="'lint'"):
            parse_definitions("id: lint\nname: Lint\ndescription: x\n")


class TestHookDefinition:
    def test_requires_a_script_source(self) -> None:
        with pytest.raises(ValueError, match="either script or script_path"):
            HookDefinition(id="a", name="A", description="d")

    def test_rejects_both_script_sources(self) -> None:
        with pytest.raises(ValueError, match="both script and script_path"):
            HookDefinition(id="a", name="A", description="d", script="x", script_path="y")

    def test_rejects_blank_fields(self) -> None:
        with pytest.raises(ValueError):
            HookDefinition(id="a", name=" ", description="d", script="x")

    def test_rejects_path_like_ids(self) -> None:
        with pytest.raises(ValueError):
            HookDefinition(id="../escape", name="A", description="d", script="x")

    def test_rejects_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            HookDefinition(id="a", name="A", description="d", script="x", type="pre-lunch")


class TestRenderScript:
    def test_inline_script(self) -> None:
        definition = HookDefinition(id="a", name="A", description="Check it", script="exit 0\n")
        assert render_script(definition) == "#!/bin/sh\n# Check it\nexit 0\n"

    def test_script_path(self) -> None:
        definition = HookDefinition(
            id="a", name="A", description="Check it", script_path="/bin/check"
        )
        assert render_script(definition) == '#!/bin/sh\n# Check it\nexec /bin/check "$@"\n'


def test_load_definitions_from_file(tmp_path: Path) -> None:
    path = tmp_path / "hooks.yml"
    path.write_text(MANIFEST)

    assert len(load_definitions(path)) == 2


def test_load_definitions_missing_file(tmp_path: Path) -> None:
    with pytest.raises(HookDefinitionError, match="failed to read file"):
        load_definitions(tmp_path / "missing.yml")
