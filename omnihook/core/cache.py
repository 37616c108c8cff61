"""Record of the remote sources hooks were installed from."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


class SourceCache:
    """Remote repository URLs, persisted as ``sources:`` in a YAML file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._sources: list[str] | None = None

    @property
    def sources(self) -> list[str]:
        if self._sources is None:
            self._sources = self.load()
        return list(self._sources)

    def load(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable source cache {self.path}: {e}")
            return []
        sources = data.get("sources") if isinstance(data, dict) else None
        if not isinstance(sources, list):
            return []
        return [str(source) for source in sources]

    def add(self, url: str) -> bool:
        """Remember a source. Returns False if it was already known."""
        sources = self.sources
        if url in sources:
            return False
        sources.append(url)
        self._save(sources)
        return True

    def _save(self, sources: list[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump({"sources": sources}, default_flow_style=False),
            encoding="utf-8",
        )
        self._sources = sources
