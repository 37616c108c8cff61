"""Omnihook Configuration Module

Loads settings from ~/.omnihook/config.yaml, OMNIHOOK_* environment
variables and command-line overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from omnihook.core.hooks.executor import DEFAULT_HOOK_TIMEOUT, DEFAULT_MAX_CONCURRENCY
from omnihook.core.hooks.types import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".omnihook"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
CACHE_FILE = CONFIG_DIR / "cache.yaml"
DEFAULT_HOOKS_DIR = CONFIG_DIR / "hooks"
GIT_HOOKS_DIR = Path.home() / ".git_hooks"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Hooks dir variable understood by earlier omnihook releases
LEGACY_HOOKS_DIR_ENV = "OMNI_HOOKS_DIR"


def expand_path(path: str | Path) -> Path:
    """Expand a leading ~ to the user's home directory."""
    return Path(path).expanduser()


class OmnihookConfig(BaseModel):
    """Configuration for omnihook"""

    omni_hooks_dir: Path | None = Field(
        default=None,
        description="Directory holding installed hooks, one subdirectory per category",
    )

    max_concurrency: int = Field(
        default=DEFAULT_MAX_CONCURRENCY,
        ge=0,
        description="Hooks allowed to run at once (0 runs every hook at once)",
    )

    hook_timeout: float = Field(
        default=DEFAULT_HOOK_TIMEOUT,
        gt=0.0,
        le=3600.0,
        description="Seconds a single hook may run before it is killed",
    )

    log_level: LogLevel = Field(
        default="WARNING",
        description="Log level for omnihook itself",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @property
    def hooks_dir(self) -> Path | None:
        if self.omni_hooks_dir is None or not str(self.omni_hooks_dir):
            return None
        return expand_path(self.omni_hooks_dir)


class OmnihookSettings(BaseSettings):
    """Settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="OMNIHOOK_",
        extra="ignore",
    )

    omni_hooks_dir: Path | None = Field(
        default=None,
        validation_alias="OMNIHOOK_HOOKS_DIR",
        description="Hooks directory (OMNIHOOK_HOOKS_DIR)",
    )

    max_concurrency: int | None = Field(
        default=None,
        description="Concurrency limit (OMNIHOOK_MAX_CONCURRENCY)",
    )

    hook_timeout: float | None = Field(
        default=None,
        description="Per-hook timeout in seconds (OMNIHOOK_HOOK_TIMEOUT)",
    )

    log_level: str | None = Field(
        default=None,
        description="Log level (OMNIHOOK_LOG_LEVEL)",
    )


def _load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration values from a YAML file"""
    if not path.exists():
        return {}

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed using config file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Config file is not a mapping, ignoring: {path}")
        return {}
    return data


def _apply_overrides(
    values: dict[str, Any], overrides: dict[str, Any] | None
) -> dict[str, Any]:
    if not overrides:
        return values
    for key, value in overrides.items():
        if value is None:
            continue
        values[key] = value
    return values


def load_config(
    *,
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> OmnihookConfig:
    """Load configuration following priority: CLI > env > config file > defaults

    Raises:
        ConfigurationError: A value does not pass validation.
    """
    values = _load_config_file(config_path or CONFIG_FILE)

    legacy_dir = os.environ.get(LEGACY_HOOKS_DIR_ENV)
    if legacy_dir:
        values["omni_hooks_dir"] = legacy_dir

    try:
        env_settings = OmnihookSettings()
        _apply_overrides(values, env_settings.model_dump(exclude_none=True))
        _apply_overrides(values, cli_overrides)
        return OmnihookConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration: {e}") from e


def save_config(config: OmnihookConfig, config_path: Path | None = None) -> Path:
    """Write configuration values that differ from the defaults."""
    path = config_path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_defaults=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, default_flow_style=False, sort_keys=False)
    logger.debug(f"Wrote config file {path}")
    return path


def reset_config(config_path: Path | None = None) -> bool:
    """Delete the config file. Returns False if there was none."""
    path = config_path or CONFIG_FILE
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def setup_logging(level: str = "WARNING", verbose: bool = False) -> None:
    """Set up Python logging for the omnihook process"""
    logging.basicConfig(
        level="DEBUG" if verbose else level.upper(),
        format=LOG_FORMAT,
    )
