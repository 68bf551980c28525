"""Plugin facade binding host lifecycle hooks to the plugin components.

Typical FastAPI wiring in development::

    plugin = OpenAPIPlugin.from_settings()
    app = FastAPI(lifespan=plugin.lifespan)
    plugin.install(app)

Each application startup (including every ``uvicorn --reload`` restart) runs a
file-generation pass and a schema sync.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI

from openapi_plugin.codegen import CodeGenOrchestrator
from openapi_plugin.core.settings import Settings, get_settings
from openapi_plugin.errors import ConfigurationError
from openapi_plugin.generators.base import ServiceGenerator
from openapi_plugin.generators.services import DatamodelServiceGenerator
from openapi_plugin.lib.artifacts import ArtifactStore, ResetOutcome, ResetStatus
from openapi_plugin.lib.tasks import TaskSet
from openapi_plugin.openapi.schema import SchemaFetcher, make_fetcher
from openapi_plugin.server.integration import DevServerIntegration
from openapi_plugin.spec.config import ConfigSet
from openapi_plugin.spec.loader import load_config_set
from openapi_plugin.sync import SchemaSyncOrchestrator
from openapi_plugin.viewer.generator import ViewerPageGenerator

logger = logging.getLogger(__name__)


class OpenAPIPlugin:
    """Development integration for one or more OpenAPI specs."""

    def __init__(
        self,
        settings: Settings,
        config_set: ConfigSet,
        fetcher: SchemaFetcher | None = None,
        generator: ServiceGenerator | None = None,
        config_path: Path | None = None,
    ) -> None:
        self.settings = settings
        self.environment = settings.environment
        self.config_set = config_set
        self.config_path = config_path

        if fetcher is None:
            fetcher = make_fetcher(settings.fetch_timeout, settings.project_root)
        if generator is None:
            generator = DatamodelServiceGenerator(fetcher)

        self.store = ArtifactStore(settings.artifacts_dir)
        self.viewer = ViewerPageGenerator(settings.static_prefix)
        self.integration = DevServerIntegration(
            environment=self.environment,
            artifacts_dir=self.store.root_path(),
            viewer_file=settings.viewer_file,
            static_prefix=settings.static_prefix,
        )
        self.schema_sync = SchemaSyncOrchestrator(self.environment, self.store, fetcher)
        self.codegen = CodeGenOrchestrator(settings.project_root, generator)
        self._reset_outcome: ResetOutcome | None = None
        # Running tasks must stay referenced until they finish
        self.pending: list[TaskSet] = []

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs) -> OpenAPIPlugin:
        """Build a plugin from settings and the YAML configuration file.

        Raises:
            ConfigurationError: If the configuration file is missing or invalid
        """
        if settings is None:
            settings = get_settings()
        config_path = settings.config_path
        config_set = load_config_set(config_path)
        return cls(settings, config_set, config_path=config_path, **kwargs)

    def activate(self) -> ResetOutcome:
        """Reset the artifact directory; only the first call does any work."""
        if self._reset_outcome is not None:
            return self._reset_outcome

        logger.info("Using openapi Plugin")
        if self.environment.is_development:
            self._reset_outcome = self.store.reset()
        else:
            self._reset_outcome = ResetOutcome(
                ResetStatus.SKIPPED, f"environment is {self.environment.value}"
            )
        return self._reset_outcome

    def install(self, app: FastAPI) -> bool:
        """Mount the artifact middleware and the viewer route in development."""
        return self.integration.install(app, self.settings.viewer_path)

    def reload_config(self) -> ConfigSet:
        """Re-read the configuration file, keeping the current set on error."""
        if self.config_path is None:
            return self.config_set
        try:
            self.config_set = load_config_set(self.config_path)
        except ConfigurationError as e:
            logger.error("Keeping previous openapi configuration: %s", e)
        return self.config_set

    def on_generate_files(self) -> Path | None:
        """Regenerate the viewer page from the current configuration."""
        if not self.environment.is_development:
            return None
        config_set = self.reload_config()
        try:
            return self.viewer.write(config_set, self.settings.viewer_file)
        except OSError as e:
            logger.error("Could not write viewer page: %s", e)
            return None

    def on_recompile(self) -> TaskSet:
        """Start re-publishing every spec's schema document."""
        return self._track(self.schema_sync.on_recompile(self.config_set))

    def run_command(self) -> TaskSet:
        """Start service and mock generation for every spec."""
        return self._track(self.codegen.run_all(self.config_set))

    def _track(self, tasks: TaskSet) -> TaskSet:
        self.pending = [pending for pending in self.pending if not pending.done()]
        if len(tasks):
            self.pending.append(tasks)
        return tasks

    @asynccontextmanager
    async def lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        """FastAPI lifespan running the startup hooks."""
        self.activate()
        self.on_generate_files()
        self.on_recompile()
        yield
