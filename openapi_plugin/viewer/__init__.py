"""Documentation viewer page generation."""

from openapi_plugin.viewer.generator import ViewerPageGenerator

__all__ = ["ViewerPageGenerator"]
