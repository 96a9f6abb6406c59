"""Task manager — periodic background jobs on the event loop.

Drives the notification queue tick.  Jobs never overlap with themselves;
failures are logged and the loop keeps going.
"""

from __future__ import annotations

from herald.taskmanager.manager import CronJob, TaskManager

__all__ = ["CronJob", "TaskManager"]
