"""Service and mock generators driven by OpenAPI documents."""

from openapi_plugin.generators.base import GeneratorConfig, ServiceGenerator
from openapi_plugin.generators.services import DatamodelServiceGenerator

__all__ = [
    "DatamodelServiceGenerator",
    "GeneratorConfig",
    "ServiceGenerator",
]
