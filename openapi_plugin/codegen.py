"""Service and mock generation for every configured spec."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import tomllib

from openapi_plugin.generators.base import GeneratorConfig, ServiceGenerator
from openapi_plugin.lib.tasks import TaskSet
from openapi_plugin.spec.config import ConfigSet, SpecConfig

logger = logging.getLogger(__name__)


def read_project_name(project_root: Path) -> str | None:
    """Return the host package name from pyproject.toml, without any scope."""

    pyproject = project_root / "pyproject.toml"
    if not pyproject.exists():
        return None
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Could not read project name from %s: %s", pyproject, e)
        return None
    name = (data.get("project") or {}).get("name")
    if not name or not isinstance(name, str):
        return None
    return name.split("/")[-1]


class CodeGenOrchestrator:
    """Prepare output directories and delegate generation per spec."""

    def __init__(self, project_root: Path, generator: ServiceGenerator) -> None:
        self.project_root = project_root
        self.generator = generator

    @property
    def mock_path(self) -> Path:
        return self.project_root / "mock"

    @property
    def servers_path(self) -> Path:
        return self.project_root / "src" / "services"

    def build_config(self, spec: SpecConfig, project_name: str | None) -> GeneratorConfig:
        """Merge host defaults with the spec's own settings."""
        return GeneratorConfig(
            spec=spec,
            project_name=spec.display_name or project_name or spec.name,
            servers_path=self.servers_path,
            mock_path=self.mock_path if spec.mock_enabled else None,
        )

    async def _generate_one(self, spec: SpecConfig, project_name: str | None) -> list[Path]:
        config = self.build_config(spec, project_name)
        if config.mock_path is not None:
            config.mock_path.mkdir(parents=True, exist_ok=True)
        config.servers_path.mkdir(parents=True, exist_ok=True)

        generated = await asyncio.to_thread(self.generator.generate, config)
        logger.info("[openAPI]: execution complete (%s)", spec.name)
        return generated

    def run_all(self, config_set: ConfigSet) -> TaskSet:
        """Start generation for every spec and return without waiting."""
        project_name = read_project_name(self.project_root)
        tasks = TaskSet("openapi-codegen")
        for spec in config_set:
            tasks.spawn(spec.name, self._generate_one(spec, project_name))
        return tasks
