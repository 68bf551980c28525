"""Tests for openapi_plugin.lib.artifacts module."""

from __future__ import annotations

import json
from pathlib import Path
import random
import stat
import threading

import pytest

from openapi_plugin.lib.artifacts import (
    ArtifactStore,
    ResetStatus,
    artifact_filename,
)


@pytest.fixture
def store(tmp_path: Path) -> ArtifactStore:
    return ArtifactStore(tmp_path / "open_api")


def test_artifact_filename() -> None:
    assert artifact_filename("petstore") == "umi-plugins_petstore.json"


class TestReset:
    """Tests for ArtifactStore.reset."""

    def test_creates_directory(self, store: ArtifactStore) -> None:
        outcome = store.reset()

        assert outcome.status is ResetStatus.SUCCEEDED
        assert outcome.ok
        assert store.root_path().is_dir()

    def test_removes_previous_artifacts(self, store: ArtifactStore) -> None:
        store.publish("stale", {"old": True})

        store.reset()

        assert list(store.root_path().iterdir()) == []
        assert store.read("stale") is None

    def test_failure_is_reported_not_raised(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory", encoding="utf-8")
        store = ArtifactStore(blocker / "open_api")

        outcome = store.reset()

        assert outcome.status is ResetStatus.FAILED
        assert outcome.reason


class TestPublish:
    """Tests for ArtifactStore.publish and read."""

    def test_round_trip(self, store: ArtifactStore) -> None:
        document = {"openapi": "3.0.0", "info": {"title": "Ünïcode", "version": "1"}}

        path = store.publish("a", document)

        assert path == store.root_path() / "umi-plugins_a.json"
        assert store.read("a") == json.dumps(document, indent=2, ensure_ascii=False)
        assert json.loads(path.read_text(encoding="utf-8")) == document

    def test_last_write_wins(self, store: ArtifactStore) -> None:
        store.publish("a", {"version": 1})
        store.publish("a", {"version": 2})

        assert json.loads(store.read("a")) == {"version": 2}
        assert store.list_names() == ["a"]

    def test_recreates_missing_directory(self, store: ArtifactStore) -> None:
        assert not store.root_path().exists()

        store.publish("a", {})

        assert store.read("a") == "{}"

    def test_published_file_is_world_readable(self, store: ArtifactStore) -> None:
        path = store.publish("a", {})

        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_read_unpublished(self, store: ArtifactStore) -> None:
        assert store.read("missing") is None

    def test_no_temp_files_left(self, store: ArtifactStore) -> None:
        for i in range(5):
            store.publish("a", {"i": i})

        assert [p.name for p in store.root_path().iterdir()] == ["umi-plugins_a.json"]

    def test_unserializable_document_leaves_previous_content(self, store: ArtifactStore) -> None:
        store.publish("a", {"ok": True})

        with pytest.raises(TypeError):
            store.publish("a", {"bad": object()})

        assert json.loads(store.read("a")) == {"ok": True}

    def test_concurrent_readers_never_see_partial_content(self, store: ArtifactStore) -> None:
        documents = [
            {"version": i, "payload": "x" * random.randint(1000, 50000)} for i in range(20)
        ]
        expected = {json.dumps(d, indent=2, ensure_ascii=False) for d in documents}
        store.publish("a", documents[0])
        observed: list[str] = []
        done = threading.Event()

        def reader() -> None:
            while not done.is_set():
                content = store.read("a")
                if content is not None:
                    observed.append(content)

        def writer() -> None:
            for _ in range(5):
                for document in documents:
                    store.publish("a", document)

        readers = [threading.Thread(target=reader) for _ in range(3)]
        writers = [threading.Thread(target=writer) for _ in range(2)]
        for thread in readers + writers:
            thread.start()
        for thread in writers:
            thread.join()
        done.set()
        for thread in readers:
            thread.join()

        assert observed
        assert set(observed) <= expected
