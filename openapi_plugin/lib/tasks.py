"""Fan-out of independent per-spec tasks.

Tasks are started immediately and run concurrently on the running event
loop. Nothing waits for them unless the caller asks via ``wait_all``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass
import logging
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskOutcome:
    """Outcome of a single named task."""

    name: str
    ok: bool
    result: Any = None
    error: BaseException | None = None


class TaskSet:
    """A set of named tasks with an explicit join point.

    Work spawned without a running event loop is not started; it is recorded
    as a failed outcome instead of raising into the caller.
    """

    def __init__(self, label: str = "task") -> None:
        self.label = label
        self._entries: list[tuple[str, asyncio.Task[Any] | TaskOutcome]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def done(self) -> bool:
        return all(
            isinstance(entry, TaskOutcome) or entry.done() for _, entry in self._entries
        )

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._entries]

    def spawn(self, name: str, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any] | None:
        """Schedule ``coro`` without waiting for it."""
        task_name = f"{self.label}:{name}"
        try:
            asyncio.get_running_loop()
        except RuntimeError as e:
            coro.close()
            logger.error("%s not started: no running event loop", task_name)
            self._entries.append((name, TaskOutcome(name=name, ok=False, error=e)))
            return None

        task = asyncio.create_task(coro, name=task_name)
        task.add_done_callback(self._report)
        self._entries.append((name, task))
        return task

    def _report(self, task: asyncio.Task[Any]) -> None:
        # Retrieving the exception here keeps unjoined failures visible in the log
        if task.cancelled():
            logger.warning("%s was cancelled", task.get_name())
            return
        error = task.exception()
        if error is not None:
            logger.error("%s failed: %s", task.get_name(), error, exc_info=error)

    async def wait_all(self) -> list[TaskOutcome]:
        """Wait for every task and collect outcomes in spawn order."""
        tasks = [entry for _, entry in self._entries if isinstance(entry, asyncio.Task)]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        outcomes = []
        for name, entry in self._entries:
            if isinstance(entry, TaskOutcome):
                outcomes.append(entry)
            elif entry.cancelled():
                outcomes.append(TaskOutcome(name=name, ok=False, error=asyncio.CancelledError()))
            elif entry.exception() is not None:
                outcomes.append(TaskOutcome(name=name, ok=False, error=entry.exception()))
            else:
                outcomes.append(TaskOutcome(name=name, ok=True, result=entry.result()))
        return outcomes
