"""omnihook - a global Git hook manager."""

from __future__ import annotations

__version__ = "0.2.0"
