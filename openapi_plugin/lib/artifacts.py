"""On-disk store for published schema documents.

One JSON file per spec, named ``umi-plugins_<name>.json``. Writes go to a
hidden temporary file in the same directory and are renamed over the target,
so readers only ever see a complete document.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
import logging
import os
from pathlib import Path
import shutil
import tempfile
from typing import Any

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "umi-plugins_"
ARTIFACT_SUFFIX = ".json"
TEMP_PREFIX = ".tmp-"
ARTIFACT_MODE = 0o644


def artifact_filename(name: str) -> str:
    """Return the deterministic artifact file name for a spec name."""

    return f"{ARTIFACT_PREFIX}{name}{ARTIFACT_SUFFIX}"


class ResetStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ResetOutcome:
    """Result of an artifact directory reset."""

    status: ResetStatus
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ResetStatus.SUCCEEDED


class ArtifactStore:
    """Directory of generated schema documents served to the viewer."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def root_path(self) -> Path:
        return self._root

    def path_for(self, name: str) -> Path:
        return self._root / artifact_filename(name)

    def reset(self) -> ResetOutcome:
        """Delete and recreate the artifact directory.

        Never raises: a failure leaves a possibly stale directory behind and
        is reported through the returned outcome.
        """
        try:
            if self._root.exists():
                shutil.rmtree(self._root)
            self._root.mkdir(parents=True)
        except OSError as e:
            logger.warning("Could not reset artifact directory %s: %s", self._root, e)
            return ResetOutcome(ResetStatus.FAILED, str(e))
        return ResetOutcome(ResetStatus.SUCCEEDED)

    def publish(self, name: str, document: Any) -> Path:
        """Write ``document`` pretty-printed under the artifact name for ``name``."""
        target = self.path_for(name)
        content = json.dumps(document, indent=2, ensure_ascii=False)

        self._root.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=ARTIFACT_SUFFIX, dir=self._root)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            # mkstemp creates 0600 files
            os.chmod(tmp_name, ARTIFACT_MODE)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Published %s", target)
        return target

    def read(self, name: str) -> str | None:
        """Return the published content for ``name``, or None if never published."""
        try:
            return self.path_for(name).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def list_names(self) -> list[str]:
        """Names of all published artifacts, sorted."""
        if not self._root.is_dir():
            return []
        return sorted(
            path.name[len(ARTIFACT_PREFIX) : -len(ARTIFACT_SUFFIX)]
            for path in self._root.glob(f"{ARTIFACT_PREFIX}*{ARTIFACT_SUFFIX}")
        )
