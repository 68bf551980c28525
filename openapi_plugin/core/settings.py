"""Plugin configuration loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from openapi_plugin.lib.env import Environment, get_project_root


class Settings(BaseSettings):
    """Settings for the openapi plugin.

    Environment variable names are formed by uppercasing the field name and
    prepending the OPENAPI_PLUGIN_ prefix. Example: OPENAPI_PLUGIN_ENVIRONMENT
    overrides environment.
    """

    environment: Environment = Environment.DEVELOPMENT
    project_root: Path = Field(default_factory=get_project_root)
    config_file: Path = Path("openapi.yml")

    # Relative paths are resolved against project_root
    cache_dir: Path = Path(".cache") / "open_api"
    tmp_dir: Path = Path(".openapi_tmp")

    static_prefix: str = "/__openapi__"
    viewer_path: str = "/umi/plugin/openapi"

    fetch_timeout: float = 30.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="OPENAPI_PLUGIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def resolve(self, path: Path) -> Path:
        """Resolve a possibly relative path against the project root."""

        if path.is_absolute():
            return path
        return self.project_root / path

    @property
    def artifacts_dir(self) -> Path:
        """Directory holding the published schema documents."""

        return self.resolve(self.cache_dir)

    @property
    def viewer_file(self) -> Path:
        """Location of the generated viewer page."""

        return self.resolve(self.tmp_dir) / "plugin-openapi" / "openapi.html"

    @property
    def config_path(self) -> Path:
        return self.resolve(self.config_file)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the plugin settings."""

    return Settings()
