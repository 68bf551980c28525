"""Generator contract shared by the code generation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import keyword
import re
from typing import Protocol

from openapi_plugin.spec.config import SpecConfig

GENERATED_HEADER = (
    "# This file is generated by openapi-plugin automatically\n"
    "# DO NOT CHANGE IT MANUALLY!\n"
)


@dataclass(frozen=True)
class GeneratorConfig:
    """Everything a generator needs for one spec.

    Attributes:
        spec: The spec configuration, overrides included
        project_name: Host project name, unless the spec names itself
        servers_path: Directory for generated service code
        mock_path: Directory for mock handlers, None when mocks are disabled
    """

    spec: SpecConfig
    project_name: str
    servers_path: Path
    mock_path: Path | None = None

    @property
    def module_name(self) -> str:
        """Python module name for the generated files.

        Taken from the namespace, then the display name, then the project name.
        """
        return to_module_name(self.spec.namespace or self.spec.display_name or self.project_name)


class ServiceGenerator(Protocol):
    """Turns one GeneratorConfig into files on disk."""

    def generate(self, config: GeneratorConfig) -> list[Path]: ...


def to_module_name(value: str) -> str:
    """Convert an arbitrary name into a valid snake_case module name."""
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    name = re.sub(r"[^0-9a-zA-Z]+", "_", name).strip("_").lower()
    if not name:
        return "api"
    if name[0].isdigit():
        name = f"api_{name}"
    return name


def to_identifier(value: str, used: set[str] | None = None) -> str:
    """Convert ``value`` into a unique, non-keyword Python identifier.

    Names already in ``used`` get a numeric suffix; the result is added to it.
    """
    name = to_module_name(value)
    if keyword.iskeyword(name):
        name = f"{name}_"
    if used is None:
        return name

    candidate = name
    counter = 2
    while candidate in used:
        candidate = f"{name}_{counter}"
        counter += 1
    used.add(candidate)
    return candidate


def write_file(path: Path, content: str) -> None:
    """Write generated content with the standard header."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if not content.startswith(GENERATED_HEADER):
        content = GENERATED_HEADER + "\n" + content
    path.write_text(content, encoding="utf-8")
