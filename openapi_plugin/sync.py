"""Re-publish schema documents after each successful recompilation."""

from __future__ import annotations

import logging
from pathlib import Path

from openapi_plugin.lib.artifacts import ArtifactStore
from openapi_plugin.lib.env import Environment
from openapi_plugin.lib.tasks import TaskSet
from openapi_plugin.openapi.schema import SchemaFetcher
from openapi_plugin.spec.config import ConfigSet, SpecConfig

logger = logging.getLogger(__name__)


class SchemaSyncOrchestrator:
    """Fetch every spec's schema and publish it to the artifact store.

    Each spec runs as its own task; one spec failing to fetch or publish
    never stops the others.
    """

    def __init__(
        self,
        environment: Environment,
        store: ArtifactStore,
        fetcher: SchemaFetcher,
    ) -> None:
        self.environment = environment
        self.store = store
        self.fetcher = fetcher

    async def _sync_one(self, spec: SpecConfig) -> Path:
        if not spec.schema_location:
            msg = f"spec '{spec.name}' has no schema location"
            raise ValueError(msg)
        document = await self.fetcher(spec.schema_location)
        path = self.store.publish(spec.name, document)
        logger.info("[openAPI]: published %s", path.name)
        return path

    def on_recompile(self, config_set: ConfigSet) -> TaskSet:
        """Start one sync task per spec and return without waiting."""
        tasks = TaskSet("openapi-sync")
        if not self.environment.is_development:
            return tasks

        for spec in config_set:
            tasks.spawn(spec.name, self._sync_one(spec))
        return tasks
