"""Shared fixtures for plugin tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
import logging
from pathlib import Path
from typing import Any

import pytest

from openapi_plugin.core.settings import Settings, get_settings
from openapi_plugin.lib.env import Environment
from openapi_plugin.spec.config import SpecConfig

PETSTORE: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "paths": {
        "/pets/{petId}": {
            "get": {
                "operationId": "getPetById",
                "summary": "Find pet by ID",
                "responses": {
                    "200": {
                        "description": "A pet",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"},
                                "example": {"id": 1, "name": "doggie"},
                            }
                        },
                    }
                },
            }
        },
        "/pets": {
            "post": {
                "responses": {"201": {"description": "Created"}},
            }
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
                "required": ["id", "name"],
            }
        }
    },
}


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_plugin_logger() -> Generator[None, None, None]:
    """Undo configure_logging so caplog sees plugin records in later tests."""
    yield
    plugin_logger = logging.getLogger("openapi_plugin")
    for handler in list(plugin_logger.handlers):
        plugin_logger.removeHandler(handler)
    plugin_logger.setLevel(logging.NOTSET)
    plugin_logger.propagate = True


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """An empty host project with a pyproject.toml."""

    root = tmp_path / "project"
    root.mkdir()
    (root / "pyproject.toml").write_text(
        '[project]\nname = "acme/pet-shop"\nversion = "0.1.0"\n', encoding="utf-8"
    )
    return root


@pytest.fixture
def make_settings(project_root: Path) -> Callable[..., Settings]:
    def _make(environment: Environment = Environment.DEVELOPMENT, **overrides: Any) -> Settings:
        return Settings(environment=environment, project_root=project_root, **overrides)

    return _make


@pytest.fixture
def dev_settings(make_settings: Callable[..., Settings]) -> Settings:
    return make_settings()


def spec(name: str | None, location: str | None = None, **kwargs: Any) -> SpecConfig:
    """Build a SpecConfig with a default schema location."""
    return SpecConfig(
        display_name=name,
        schema_location=location if location is not None else f"https://example.test/{name}.json",
        **kwargs,
    )


class FakeFetcher:
    """Async fetcher returning canned documents, failing for chosen locations."""

    def __init__(self, documents: dict[str, Any], failing: set[str] | None = None) -> None:
        self.documents = documents
        self.failing = failing or set()
        self.calls: list[str] = []

    async def __call__(self, location: str) -> dict[str, Any]:
        self.calls.append(location)
        if location in self.failing:
            msg = f"unreachable: {location}"
            raise ConnectionError(msg)
        return self.documents[location]
