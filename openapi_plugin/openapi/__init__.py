"""Schema document fetching."""

from openapi_plugin.openapi.schema import SchemaFetcher, fetch_schema, make_fetcher

__all__ = ["SchemaFetcher", "fetch_schema", "make_fetcher"]
