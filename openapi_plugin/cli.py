"""Command line entrypoint for service and mock generation."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from openapi_plugin.core import configure_logging, get_settings
from openapi_plugin.errors import ConfigurationError
from openapi_plugin.plugin import OpenAPIPlugin

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="openapi",
        description="Generate typed services and mock handlers for every configured OpenAPI spec.",
    )


async def run_openapi(plugin: OpenAPIPlugin) -> int:
    """Run generation for all specs and report per-spec failures."""
    tasks = plugin.run_command()
    outcomes = await tasks.wait_all()
    failed = [outcome for outcome in outcomes if not outcome.ok]
    for outcome in failed:
        logger.error("[openAPI]: %s failed: %s", outcome.name, outcome.error)
    if not outcomes:
        logger.warning("[openAPI]: no specs configured")
    elif not failed:
        logger.info("[openAPI]: all %d spec(s) generated", len(outcomes))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    build_parser().parse_args(argv)
    configure_logging()

    try:
        plugin = OpenAPIPlugin.from_settings(get_settings())
    except ConfigurationError as e:
        logger.error("Invalid openapi configuration: %s", e)
        return 1

    return asyncio.run(run_openapi(plugin))


if __name__ == "__main__":
    sys.exit(main())
