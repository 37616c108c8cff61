"""Hook definition files.

A definition file is YAML describing one hook, or a manifest with a
``hooks`` list:

    hooks:
      - id: no-todos
        name: No TODOs
        description: Reject staged files containing TODO
        type: pre-commit
        script: |
          ! git diff --cached | grep -q TODO

``script`` is an inline shell body; ``script_path`` points at an existing
executable instead. Exactly one of the two must be given.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
import yaml

from omnihook.core.hooks.types import HookCategory, HookDefinitionError

logger = logging.getLogger(__name__)

DEFINITION_FILENAMES = ("hook.yml", "omnihook.yml")


class HookDefinition(BaseModel):
    """A single hook as declared in a definition file."""

    id: str = Field(description="File name the hook is installed under")
    name: str
    description: str
    type: HookCategory = Field(
        default=HookCategory.PRE_COMMIT, description="Git hook the script runs for"
    )
    script: str | None = None
    script_path: str | None = None

    @field_validator("id", "name", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("id")
    @classmethod
    def _plain_file_name(cls, value: str) -> str:
        if "/" in value or value in (".", ".."):
            raise ValueError("must be a plain file name")
        return value

    @model_validator(mode="after")
    def _one_script_source(self) -> HookDefinition:
        if not self.script and not self.script_path:
            raise ValueError("either script or script_path must be provided")
        if self.script and self.script_path:
            raise ValueError("hook cannot have both script and script_path")
        return self


def _validate(data: dict[str, Any]) -> HookDefinition:
    try:
        return HookDefinition.model_validate(data)
    except ValidationError as e:
        hook_id = data.get("id") or "<unnamed>"
        raise HookDefinitionError(
            f"invalid hook configuration for '{hook_id}': {e}"
        ) from e


def parse_definitions(text: str) -> list[HookDefinition]:
    """Parse definition YAML into hook definitions.

    Raises:
        HookDefinitionError: The document is neither a manifest nor a
            single hook, or a hook fails validation.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise HookDefinitionError(f"failed to parse YAML: {e}") from e

    if isinstance(data, dict):
        hooks = data.get("hooks")
        if isinstance(hooks, list) and hooks:
            definitions = []
            for entry in hooks:
                if not isinstance(entry, dict):
                    raise HookDefinitionError(
                        "failed to parse YAML: hooks entries must be mappings"
                    )
                definitions.append(_validate(entry))
            return definitions
        if data.get("id"):
            return [_validate(data)]

    raise HookDefinitionError("failed to parse YAML: file may be improperly formatted")


def load_definitions(path: Path) -> list[HookDefinition]:
    """Read and parse a definition file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise HookDefinitionError(f"failed to read file: {e}") from e
    definitions = parse_definitions(text)
    logger.debug(f"Loaded {len(definitions)} hook definitions from {path}")
    return definitions


def render_script(definition: HookDefinition) -> str:
    """Build the executable written to the hooks directory."""
    content = f"#!/bin/sh\n# {definition.description}\n"
    if definition.script:
        content += f"{definition.script.rstrip()}\n"
    else:
        content += f'exec {definition.script_path} "$@"\n'
    return content
