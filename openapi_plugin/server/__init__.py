"""Development server integration."""

from openapi_plugin.server.integration import ArtifactStaticMiddleware, DevServerIntegration

__all__ = ["ArtifactStaticMiddleware", "DevServerIntegration"]
