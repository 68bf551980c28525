"""Fetch OpenAPI schema documents from URLs or local files.

Both JSON and YAML bodies are accepted; JSON is a subset of YAML so a single
``yaml.safe_load`` parses either.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import functools
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from openapi_plugin.errors import SchemaFetchError

logger = logging.getLogger(__name__)

SchemaFetcher = Callable[[str], Awaitable[dict[str, Any]]]

DEFAULT_TIMEOUT = 30.0


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def parse_schema(text: str, location: str) -> dict[str, Any]:
    """Parse a JSON or YAML schema body into a mapping."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaFetchError(location, f"Invalid schema document: {e}") from e

    if not isinstance(document, dict):
        raise SchemaFetchError(location, "Schema document must be a mapping")
    return document


async def fetch_schema(
    location: str,
    timeout: float = DEFAULT_TIMEOUT,
    base_dir: Path | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Fetch and parse the schema document at ``location``.

    Args:
        location: http(s) URL or filesystem path
        timeout: Transport timeout for remote documents
        base_dir: Directory relative paths are resolved against
        transport: Optional httpx transport, mainly for tests

    Raises:
        SchemaFetchError: If the document is unreachable or unparsable
    """
    if is_remote(location):
        try:
            async with httpx.AsyncClient(
                timeout=timeout, follow_redirects=True, transport=transport
            ) as client:
                response = await client.get(location)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SchemaFetchError(
                location, f"Server returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise SchemaFetchError(location, f"Request failed: {e}") from e
        text = response.text
    else:
        path = Path(location)
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaFetchError(location, f"Cannot read file: {e}") from e

    logger.debug("Fetched schema from %s", location)
    return parse_schema(text, location)


def make_fetcher(timeout: float = DEFAULT_TIMEOUT, base_dir: Path | None = None) -> SchemaFetcher:
    """Bind transport settings into a single-argument fetcher."""
    return functools.partial(fetch_schema, timeout=timeout, base_dir=base_dir)
