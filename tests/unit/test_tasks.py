"""Tests for openapi_plugin.lib.tasks module."""

from __future__ import annotations

import asyncio
import logging

import pytest

from openapi_plugin.lib.tasks import TaskSet


async def _value(value: int, delay: float = 0) -> int:
    await asyncio.sleep(delay)
    return value


async def _fail(message: str) -> None:
    raise RuntimeError(message)


@pytest.mark.asyncio
async def test_wait_all_collects_outcomes_in_spawn_order() -> None:
    tasks = TaskSet("test")
    tasks.spawn("slow", _value(1, delay=0.02))
    tasks.spawn("broken", _fail("boom"))
    tasks.spawn("fast", _value(3))

    outcomes = await tasks.wait_all()

    assert [o.name for o in outcomes] == ["slow", "broken", "fast"]
    assert [o.ok for o in outcomes] == [True, False, True]
    assert outcomes[0].result == 1
    assert str(outcomes[1].error) == "boom"


@pytest.mark.asyncio
async def test_spawn_does_not_wait() -> None:
    started = asyncio.Event()

    async def work() -> None:
        started.set()

    tasks = TaskSet()
    tasks.spawn("work", work())

    assert not started.is_set()
    assert not tasks.done()
    await tasks.wait_all()
    assert started.is_set()
    assert tasks.done()


@pytest.mark.asyncio
async def test_empty_set() -> None:
    tasks = TaskSet()

    assert len(tasks) == 0
    assert await tasks.wait_all() == []


@pytest.mark.asyncio
async def test_unjoined_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    tasks = TaskSet("sync")
    task = tasks.spawn("b", _fail("unreachable"))

    with caplog.at_level(logging.ERROR, logger="openapi_plugin.lib.tasks"):
        while not task.done():
            await asyncio.sleep(0)
        await asyncio.sleep(0)

    assert "sync:b failed: unreachable" in caplog.text


def test_spawn_without_running_loop_records_failure(caplog: pytest.LogCaptureFixture) -> None:
    tasks = TaskSet("sync")
    coro = _value(1)

    with caplog.at_level(logging.ERROR, logger="openapi_plugin.lib.tasks"):
        task = tasks.spawn("a", coro)

    assert task is None
    assert len(tasks) == 1
    assert tasks.done()
    assert coro.cr_frame is None
    assert "sync:a not started: no running event loop" in caplog.text

    outcomes = asyncio.run(tasks.wait_all())

    assert [o.name for o in outcomes] == ["a"]
    assert not outcomes[0].ok
    assert isinstance(outcomes[0].error, RuntimeError)
