"""Concurrency-limited FIFO runner for calls to the translator microservice.

The translator cannot serve parallel requests, so every backend call is funnelled
through a `SingleFlightQueue` with a concurrency of one. Jobs start strictly in
submission order; a failing job only fails its own caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Awaitable, Callable, Deque, Set, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Task = Callable[[], Awaitable[T]]


class SingleFlightQueue:
    """Run submitted coroutine factories with at most `concurrency` in flight."""

    def __init__(self, concurrency: int = 1) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.concurrency = concurrency
        self.running = 0
        self._jobs: Deque[Tuple[Task, asyncio.Future]] = deque()
        self._workers: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._jobs)

    def submit(self, task: Task) -> "asyncio.Future[T]":
        """Queue `task` and return a future settled with its result or exception."""
        future = asyncio.get_running_loop().create_future()
        self._jobs.append((task, future))
        self._run_next()
        return future

    def _run_next(self) -> None:
        while self.running < self.concurrency and self._jobs:
            task, future = self._jobs.popleft()
            if future.done():
                # Caller gave up (cancelled) while waiting.
                continue
            self.running += 1
            worker = asyncio.ensure_future(self._run(task, future))
            self._workers.add(worker)
            worker.add_done_callback(self._workers.discard)

    async def _run(self, task: Task, future: asyncio.Future) -> None:
        try:
            result = await task()
        except asyncio.CancelledError:
            if not future.done():
                future.cancel()
            raise
        except Exception as exc:
            logger.debug("Queued task failed: %s", exc)
            if not future.done():
                future.set_exception(exc)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self.running -= 1
            self._run_next()

    def stats(self) -> dict:
        return {
            "queue_pending": self.pending,
            "queue_running": self.running,
            "queue_concurrency": self.concurrency,
        }


__all__ = ["SingleFlightQueue"]
