"""Default service generator.

Typed models come from datamodel-code-generator used as a library. A typed
client (one async function per operation) and optional mock handlers are
rendered from Jinja2 templates.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
import re
from typing import Any

from datamodel_code_generator import (
    DataModelType,
    InputFileType,
    LiteralType,
    PythonVersion,
    generate,
)
from jinja2 import Environment, FileSystemLoader

from openapi_plugin.errors import GenerationError, SchemaFetchError
from openapi_plugin.generators.base import (
    GeneratorConfig,
    to_identifier,
    to_module_name,
    write_file,
)
from openapi_plugin.openapi.schema import SchemaFetcher, fetch_schema

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")


def default_function_name(operation: dict[str, Any], method: str, path: str) -> str:
    """Derive a handler name from operationId, or from method and path."""
    operation_id = operation.get("operationId")
    if operation_id:
        return to_module_name(operation_id)
    return to_module_name(f"{method}_{re.sub(r'[{}]', '', path)}")


def first_example(operation: dict[str, Any]) -> Any:
    """Return the first documented JSON example of a success response."""
    responses = operation.get("responses") or {}
    for status in sorted(responses, key=str):
        if not str(status).startswith("2"):
            continue
        content = (responses[status] or {}).get("content") or {}
        media = content.get("application/json") or {}
        if "example" in media:
            return media["example"]
        examples = media.get("examples") or {}
        for example in examples.values():
            if isinstance(example, dict) and "value" in example:
                return example["value"]
    return {}


SCHEMA_TYPES = {
    "integer": "int",
    "number": "float",
    "string": "str",
    "boolean": "bool",
    "array": "list[Any]",
    "object": "dict[str, Any]",
}
_PATH_PARAM = re.compile(r"\{([^{}/]+)\}")
# Names the client template binds at module or function level
_CLIENT_LOCALS = {"request", "Any", "httpx", "BASE_URL", "query", "body"}


def resolve_ref(document: dict[str, Any], item: Any) -> Any:
    """Follow a local ``#/...`` JSON reference; other items are returned as-is."""
    if not isinstance(item, dict) or not str(item.get("$ref", "")).startswith("#/"):
        return item
    node: Any = document
    for part in item["$ref"][2:].split("/"):
        if not isinstance(node, dict):
            return {}
        node = node.get(part.replace("~1", "/").replace("~0", "~"))
    return node or {}


def python_type(document: dict[str, Any], schema: Any) -> str:
    schema = resolve_ref(document, schema)
    if not isinstance(schema, dict):
        return "Any"
    return SCHEMA_TYPES.get(schema.get("type"), "Any")


def _optional(name: str, annotation: str) -> str:
    if annotation == "Any":
        return f"{name}: Any = None"
    return f"{name}: {annotation} | None = None"


def build_request_context(
    document: dict[str, Any],
    path_item: dict[str, Any],
    operation: dict[str, Any],
    full_path: str,
) -> dict[str, Any]:
    """Build the signature, URL and query mapping of one client function."""
    parameters: dict[tuple[str, str], dict[str, Any]] = {}
    # Operation-level parameters override path-level ones with the same name and location
    for raw in [*(path_item.get("parameters") or []), *(operation.get("parameters") or [])]:
        param = resolve_ref(document, raw)
        if isinstance(param, dict) and "name" in param:
            parameters[(param["name"], param.get("in", ""))] = param
    for name in _PATH_PARAM.findall(full_path):
        parameters.setdefault((name, "path"), {"name": name, "in": "path", "required": True})

    used = set(_CLIENT_LOCALS)
    required: list[str] = []
    optional: list[str] = []
    query: list[str] = []
    url = full_path

    for (name, location), param in parameters.items():
        if location not in ("path", "query"):
            continue
        py_name = to_identifier(name, used)
        annotation = python_type(document, param.get("schema"))
        if location == "path":
            url = url.replace(f"{{{name}}}", f"{{{py_name}}}")
            required.append(f"{py_name}: {annotation}")
            continue
        query.append(f"{name!r}: {py_name}")
        if param.get("required"):
            required.append(f"{py_name}: {annotation}")
        else:
            optional.append(_optional(py_name, annotation))

    request_body = resolve_ref(document, operation.get("requestBody"))
    has_body = isinstance(request_body, dict)
    if has_body:
        media = (request_body.get("content") or {}).get("application/json") or {}
        annotation = python_type(document, media.get("schema"))
        if request_body.get("required"):
            required.append(f"body: {annotation}")
        else:
            optional.insert(0, _optional("body", annotation))

    return {
        "signature": ", ".join(required + optional),
        "url": f"f{url!r}" if _PATH_PARAM.search(full_path) else repr(url),
        "query": "{" + ", ".join(query) + "}",
        "has_body": has_body,
    }


def parse_request_lib_path(spec_name: str, value: str) -> dict[str, str]:
    """Split ``package.module:function`` (or ``package.module.function``)."""
    module, sep, attr = value.partition(":")
    if not sep:
        module, _, attr = value.rpartition(".")
    parts = module.split(".") if module else []
    if not parts or not all(p.isidentifier() for p in parts) or not attr.isidentifier():
        raise GenerationError(spec_name, f"invalid request library path {value!r}")
    return {"module": module, "name": attr}


class DatamodelServiceGenerator:
    """Generate Pydantic models, a typed client and optional mock routers for a spec."""

    def __init__(self, fetcher: SchemaFetcher = fetch_schema) -> None:
        self.fetcher = fetcher
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # noqa: S701 - Generating Python code
        )

    def _load_document(self, config: GeneratorConfig) -> dict[str, Any]:
        location = config.spec.schema_location
        if not location:
            raise GenerationError(config.spec.name, "missing schema location")
        try:
            # Runs in a worker thread, so a private event loop is safe here
            return asyncio.run(self.fetcher(location))
        except SchemaFetchError as e:
            raise GenerationError(config.spec.name, str(e)) from e

    def generate(self, config: GeneratorConfig) -> list[Path]:
        """Generate files for one spec."""
        document = self._load_document(config)
        generated = [
            self._generate_models(config, document),
            self._generate_client(config, document),
        ]
        if config.mock_path is not None:
            generated.append(self._generate_mock(config, document, config.mock_path))
        return generated

    def _generate_models(self, config: GeneratorConfig, document: dict[str, Any]) -> Path:
        output_file = config.servers_path / f"{config.module_name}.py"
        output_file.parent.mkdir(parents=True, exist_ok=True)
        spec = config.spec
        options: dict[str, Any] = {}
        if spec.enum_style == "union":
            options["enum_field_as_literal"] = LiteralType.All
        if spec.hooks.custom_class_name is not None:
            options["custom_class_name_generator"] = spec.hooks.custom_class_name

        try:
            generate(
                input_=json.dumps(document),
                input_file_type=InputFileType.OpenAPI,
                output_model_type=DataModelType.PydanticV2BaseModel,
                use_standard_collections=True,
                use_union_operator=True,
                use_schema_description=True,
                target_python_version=PythonVersion.PY_311,
                output=output_file,
                disable_timestamp=True,
                **options,
            )
        except Exception as e:
            raise GenerationError(spec.name, f"model generation failed: {e}") from e

        # Read generated content and write back with header
        if output_file.exists():
            write_file(output_file, output_file.read_text(encoding="utf-8"))
        logger.info("Generated models %s", output_file)
        return output_file

    def _prefix_for(self, config: GeneratorConfig, context: dict[str, Any]) -> str:
        api_prefix = config.spec.api_prefix
        if api_prefix is None:
            return ""
        if callable(api_prefix):
            return api_prefix(context) or ""
        return api_prefix

    def _prepare_context(self, config: GeneratorConfig, document: dict[str, Any]) -> dict:
        """Prepare Jinja2 template context from the schema document."""
        hooks = config.spec.hooks
        handlers = []
        used_names: set[str] = {"request", "router", "Any", "httpx", "BASE_URL"}

        for path, path_item in (document.get("paths") or {}).items():
            path_item = path_item or {}
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if operation is None:
                    continue

                if hooks.custom_function_name is not None:
                    raw_name = hooks.custom_function_name(operation)
                else:
                    raw_name = default_function_name(operation, method, path)
                name = to_identifier(raw_name, used_names)

                prefix = self._prefix_for(
                    config,
                    {
                        "path": path,
                        "method": method,
                        "http_method": repr(method.upper()),
                        "namespace": config.spec.namespace,
                        "function_name": name,
                    },
                )
                full_path = f"{prefix.rstrip('/')}{path}"
                summary = operation.get("summary") or ""
                handlers.append(
                    {
                        "name": name,
                        "method": method,
                        "path": full_path,
                        "summary": repr(summary) if summary else "",
                        "example": repr(first_example(operation)),
                        **build_request_context(document, path_item, operation, full_path),
                    }
                )

        title = (document.get("info") or {}).get("title") or config.project_name
        return {
            "title": title,
            "tag": config.module_name,
            "handlers": handlers,
        }

    def _generate_mock(
        self, config: GeneratorConfig, document: dict[str, Any], mock_path: Path
    ) -> Path:
        output_file = mock_path / f"{config.module_name}.py"
        context = self._prepare_context(config, document)
        template = self.env.get_template("mock_router.py.j2")
        write_file(
            output_file,
            template.render(docstring=repr(f"Mock handlers for {context['title']}."), **context),
        )
        logger.info("Generated mock router %s", output_file)
        return output_file

    def _generate_client(self, config: GeneratorConfig, document: dict[str, Any]) -> Path:
        output_file = config.servers_path / f"{config.module_name}_client.py"
        context = self._prepare_context(config, document)
        request_import = None
        if config.spec.request_lib_path:
            request_import = parse_request_lib_path(config.spec.name, config.spec.request_lib_path)

        template = self.env.get_template("client.py.j2")
        write_file(
            output_file,
            template.render(
                docstring=repr(f"Typed client for {context['title']}."),
                request_import=request_import,
                **context,
            ),
        )
        logger.info("Generated client %s", output_file)
        return output_file
