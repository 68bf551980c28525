"""Wire the artifact directory and viewer page into an ASGI app.

Everything here is development-only: outside development the integration
leaves the application's middleware stack and route table untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from starlette.responses import FileResponse, PlainTextResponse
from starlette.routing import Route
from starlette.types import ASGIApp, Receive, Scope, Send

from openapi_plugin.lib.artifacts import TEMP_PREFIX
from openapi_plugin.lib.env import Environment

logger = logging.getLogger(__name__)

VIEWER_ROUTE_NAME = "openapi_plugin_viewer"


class ArtifactStaticMiddleware:
    """Serve files from a directory under a URL prefix before routing.

    Requests for files that do not exist fall through to the wrapped app.
    """

    def __init__(self, app: ASGIApp, directory: Path, prefix: str) -> None:
        self.app = app
        self.directory = directory
        self.prefix = prefix.rstrip("/")

    def _resolve(self, path: str) -> Path | None:
        if not path.startswith(self.prefix + "/"):
            return None
        filename = path[len(self.prefix) + 1 :]
        # Only flat, non-hidden names; temp files and traversal are never served
        if not filename or "/" in filename or "\\" in filename or filename.startswith("."):
            return None
        candidate = self.directory / filename
        if not candidate.is_file():
            return None
        return candidate

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] in ("GET", "HEAD"):
            file_path = self._resolve(scope["path"])
            if file_path is not None:
                response = FileResponse(file_path, media_type="application/json")
                await response(scope, receive, send)
                return
        await self.app(scope, receive, send)


class DevServerIntegration:
    """Expose published artifacts and the viewer page on a FastAPI app."""

    def __init__(
        self,
        environment: Environment,
        artifacts_dir: Path,
        viewer_file: Path,
        static_prefix: str,
    ) -> None:
        self.environment = environment
        self.artifacts_dir = artifacts_dir
        self.viewer_file = viewer_file
        self.static_prefix = static_prefix

    @property
    def enabled(self) -> bool:
        return self.environment.is_development

    def middleware(self) -> tuple[type[ArtifactStaticMiddleware], dict[str, Any]] | None:
        """Return the static middleware class and its options, or None when disabled."""
        if not self.enabled:
            return None
        return ArtifactStaticMiddleware, {
            "directory": self.artifacts_dir,
            "prefix": self.static_prefix,
        }

    async def _serve_viewer(self, request: Any) -> Any:
        if not self.viewer_file.is_file():
            return PlainTextResponse("Viewer page has not been generated yet", status_code=404)
        return FileResponse(self.viewer_file, media_type="text/html")

    def register_viewer_route(self, app: FastAPI, path: str) -> bool:
        """Insert the viewer route ahead of the app's own routes."""
        if not self.enabled:
            return False
        route = Route(path, endpoint=self._serve_viewer, methods=["GET"], name=VIEWER_ROUTE_NAME)
        app.router.routes.insert(0, route)
        logger.info("OpenAPI viewer available at %s", path)
        return True

    def install(self, app: FastAPI, viewer_path: str) -> bool:
        """Add the static middleware and the viewer route to ``app``."""
        spec = self.middleware()
        if spec is None:
            logger.debug("Skipping dev server integration in %s", self.environment.value)
            return False
        middleware_cls, options = spec
        app.add_middleware(middleware_cls, **options)
        self.register_viewer_route(app, viewer_path)
        return True
