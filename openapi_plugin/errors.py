"""Exceptions raised by the openapi plugin."""

from __future__ import annotations


class OpenAPIPluginError(Exception):
    """Base class for plugin errors."""


class ConfigurationError(OpenAPIPluginError):
    """Raised when the openapi configuration is invalid."""

    def __init__(
        self,
        message: str,
        spec_name: str | None = None,
        file_path: str | None = None,
    ) -> None:
        self.message = message
        self.spec_name = spec_name
        self.file_path = file_path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        message = self.message
        if self.spec_name:
            message = f"spec '{self.spec_name}': {message}"
        if self.file_path:
            message = f"{self.file_path}: {message}"
        return message


class SchemaFetchError(OpenAPIPluginError):
    """Raised when a schema document cannot be fetched or parsed."""

    def __init__(self, location: str, message: str) -> None:
        self.location = location
        self.message = message
        super().__init__(f"{location}: {message}")


class GenerationError(OpenAPIPluginError):
    """Raised when service or mock generation fails for a spec."""

    def __init__(self, spec_name: str, message: str) -> None:
        self.spec_name = spec_name
        self.message = message
        super().__init__(f"spec '{spec_name}': {message}")
