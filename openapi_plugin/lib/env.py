"""Environment helpers for plugin tooling."""

from __future__ import annotations

from enum import Enum
import os
from pathlib import Path


class Environment(str, Enum):
    """Host environment the plugin runs in."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"

    @property
    def is_development(self) -> bool:
        return self is Environment.DEVELOPMENT


def get_project_root() -> Path:
    """Return the host project root, honoring OPENAPI_PLUGIN_ROOT overrides."""

    override = os.environ.get("OPENAPI_PLUGIN_ROOT")
    if override:
        return Path(override).resolve()
    current = Path.cwd().resolve()
    for candidate in (current, *current.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return current
