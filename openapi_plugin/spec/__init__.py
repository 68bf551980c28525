"""Spec configuration models and loading.

Public API:
    - SpecConfig, SpecHooks: a single spec configuration
    - normalize: flatten one-or-many configurations into a ConfigSet
    - load_config_set: load and validate the YAML configuration file
"""

from openapi_plugin.spec.config import (
    FALLBACK_NAME,
    ConfigSet,
    SpecConfig,
    SpecHooks,
    normalize,
)
from openapi_plugin.spec.loader import load_config_set, validate_config_set

__all__ = [
    "FALLBACK_NAME",
    "ConfigSet",
    "SpecConfig",
    "SpecHooks",
    "load_config_set",
    "normalize",
    "validate_config_set",
]
