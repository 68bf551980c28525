"""Development-time OpenAPI integration for FastAPI applications."""

from openapi_plugin.errors import (
    ConfigurationError,
    GenerationError,
    OpenAPIPluginError,
    SchemaFetchError,
)
from openapi_plugin.plugin import OpenAPIPlugin

__all__ = [
    "ConfigurationError",
    "GenerationError",
    "OpenAPIPlugin",
    "OpenAPIPluginError",
    "SchemaFetchError",
]
