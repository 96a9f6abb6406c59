"""Task manager — periodic asyncio jobs such as the queue tick.

Every registered :class:`CronJob` gets a background task that waits out its
period and then runs the handler.  Runs of one job are serialized by a
per-job lock, so a manual :meth:`TaskManager.run_once` never overlaps a
scheduled run.  The wait is measured from the start of the previous run, a
slow run shortens the next wait instead of drifting the schedule.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from herald.metrics.collector import NotificationMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CronJob:
    """A recurring background job."""

    handler: Callable[[], Awaitable[object]]
    period: float  # seconds
    name: str = ""
    run_at_start: bool = False


@dataclass
class JobStatus:
    """Run bookkeeping for one job."""

    runs: int = 0
    failures: int = 0
    last_run_at: float | None = None
    last_error: str | None = None


class TaskManager:
    """Runs named periodic jobs on the current event loop.

    Usage::

        tm = TaskManager(metrics=metrics)
        tm.register("notification-queue", CronJob(handler=processor.tick, period=5))
        await tm.start()
        ...
        await tm.run_once("notification-queue")
        await tm.stop()
    """

    def __init__(self, *, metrics: NotificationMetrics | None = None) -> None:
        self._metrics = metrics
        self._jobs: dict[str, CronJob] = {}
        self._status: dict[str, JobStatus] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._loops: dict[str, asyncio.Task[None]] = {}
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def jobs(self) -> dict[str, CronJob]:
        """Copy of the registered jobs by name."""
        return dict(self._jobs)

    def status(self, name: str) -> JobStatus:
        """Run bookkeeping for *name*.

        Raises:
            KeyError: If no job is registered under *name*.
        """
        return self._status[name]

    def register(self, name: str, job: CronJob) -> None:
        """Add or replace the job called *name*.

        A replaced job's loop is cancelled and, when the manager is running,
        the new one starts right away.  Run statistics are kept.
        """
        self._jobs[name] = CronJob(
            handler=job.handler,
            period=job.period,
            name=name,
            run_at_start=job.run_at_start,
        )
        self._status.setdefault(name, JobStatus())
        self._locks.setdefault(name, asyncio.Lock())
        previous = self._loops.pop(name, None)
        if previous is not None:
            previous.cancel()
        if self._running:
            self._spawn(name)

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        for name in self._jobs:
            self._spawn(name)
        logger.info("TaskManager started with %d jobs", len(self._jobs))

    async def stop(self) -> None:
        """Cancel every job loop and wait until they have exited."""
        if not self._running:
            return
        self._running = False
        loops = list(self._loops.values())
        self._loops.clear()
        for task in loops:
            task.cancel()
        for outcome in await asyncio.gather(*loops, return_exceptions=True):
            if isinstance(outcome, Exception):
                logger.error("Job loop ended with error during shutdown: %s", outcome)
        logger.info("TaskManager stopped")

    async def run_once(self, name: str) -> object:
        """Run *name* now, waiting for any run already in progress.

        Returns the handler's result; handler errors propagate to the caller.

        Raises:
            KeyError: If no job is registered under *name*.
        """
        return await self._execute(self._jobs[name])

    def _spawn(self, name: str) -> None:
        self._loops[name] = asyncio.create_task(self._loop(self._jobs[name]), name=name)

    async def _loop(self, job: CronJob) -> None:
        clock = asyncio.get_running_loop().time
        if job.run_at_start:
            await self._execute_logged(job)
        started = clock()
        while self._running:
            await asyncio.sleep(max(0.0, job.period - (clock() - started)))
            if not self._running:
                break
            started = clock()
            await self._execute_logged(job)

    async def _execute_logged(self, job: CronJob) -> None:
        try:
            await self._execute(job)
        except Exception:
            logger.exception("Periodic job %r failed", job.name)

    async def _execute(self, job: CronJob) -> object:
        status = self._status[job.name]
        async with self._locks[job.name]:
            status.runs += 1
            status.last_run_at = time.time()
            try:
                if self._metrics is None:
                    result = await job.handler()
                else:
                    with self._metrics.track_cron(job.name):
                        result = await job.handler()
            except Exception as exc:
                status.failures += 1
                status.last_error = str(exc)
                raise
            status.last_error = None
            return result
