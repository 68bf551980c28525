"""Viewer page generator.

Renders a standalone HTML page embedding Swagger UI with a selector over
every configured spec. Output depends only on the ConfigSet and the
constructor arguments, so the same input always yields the same text.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from openapi_plugin.lib.artifacts import ARTIFACT_PREFIX
from openapi_plugin.spec.config import FALLBACK_NAME, ConfigSet

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
SWAGGER_UI_URL = "https://unpkg.com/swagger-ui-dist@5"


class ViewerPageGenerator:
    """Generate the in-app documentation page."""

    def __init__(
        self,
        static_prefix: str,
        swagger_ui_url: str = SWAGGER_UI_URL,
        title: str = "API documentation",
    ) -> None:
        self.static_prefix = static_prefix.rstrip("/")
        self.swagger_ui_url = swagger_ui_url.rstrip("/")
        self.title = title
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=select_autoescape(["html", "html.j2"]),
            keep_trailing_newline=True,
        )

    def generate(self, config_set: ConfigSet) -> str:
        """Render the page for ``config_set``."""
        options = [spec.name for spec in config_set]
        template = self.env.get_template("viewer.html.j2")
        return template.render(
            title=self.title,
            swagger_ui_url=self.swagger_ui_url,
            static_prefix=self.static_prefix,
            artifact_prefix=ARTIFACT_PREFIX,
            options=options,
            initial=options[0] if options else FALLBACK_NAME,
        )

    def write(self, config_set: ConfigSet, output_path: Path) -> Path:
        """Render and write the page, replacing any previous version."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate(config_set), encoding="utf-8")
        logger.debug("Generated viewer page %s", output_path)
        return output_path
