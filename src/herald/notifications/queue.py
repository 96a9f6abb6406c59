"""Delivery queue — unbounded in-memory FIFO of pending jobs."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from herald.notifications.jobs import NotificationJob


class DeliveryQueue:
    """FIFO of :class:`NotificationJob` drained in bounded batches.

    Retried jobs are pushed back to the tail, behind newer work.
    """

    def __init__(self) -> None:
        self._jobs: deque[NotificationJob] = deque()

    def push(self, job: NotificationJob) -> None:
        """Append *job* to the tail."""
        self._jobs.append(job)

    def pop_batch(self, limit: int) -> list[NotificationJob]:
        """Remove and return up to *limit* jobs from the head."""
        count = min(limit, len(self._jobs))
        return [self._jobs.popleft() for _ in range(count)]

    def restore(self, jobs: list[NotificationJob]) -> None:
        """Put popped-but-unprocessed *jobs* back at the head, order kept."""
        self._jobs.extendleft(reversed(jobs))

    def snapshot(self) -> list[NotificationJob]:
        """Copy of the pending jobs, head first."""
        return list(self._jobs)

    def clear(self) -> int:
        """Drop every pending job and return how many were dropped."""
        count = len(self._jobs)
        self._jobs.clear()
        return count

    def __len__(self) -> int:
        return len(self._jobs)

    def __bool__(self) -> bool:
        return bool(self._jobs)
