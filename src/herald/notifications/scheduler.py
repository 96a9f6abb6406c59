"""Scheduler — one-shot deferred actions for delayed delivery.

Timers live on the running event loop only; pending schedules are lost on
restart and cancelled by :meth:`Scheduler.close`.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from herald.utils.ids import new_id

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def seconds_until(send_at: datetime, now: datetime) -> float:
    """Delay from *now* to *send_at*; naive datetimes are taken as UTC."""
    if send_at.tzinfo is None:
        send_at = send_at.replace(tzinfo=UTC)
    return (send_at - now).total_seconds()


class Scheduler:
    """Arms ``loop.call_later`` timers that run an action once."""

    def __init__(self, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock
        self._pending: dict[str, asyncio.TimerHandle] = {}

    @property
    def pending(self) -> int:
        """Number of armed timers that have not fired yet."""
        return len(self._pending)

    def schedule(self, send_at: datetime, action: Callable[[], object]) -> str | None:
        """Run *action* at *send_at*.

        If *send_at* is now or in the past, *action* runs synchronously and
        ``None`` is returned.  Otherwise a ``scheduled_<hex>`` token is
        returned.  Must be called from inside a running event loop.
        """
        delay = seconds_until(send_at, self._clock())
        if delay <= 0:
            action()
            return None

        loop = asyncio.get_running_loop()
        token = f"scheduled_{new_id(8)}"
        self._pending[token] = loop.call_later(delay, self._fire, token, action)
        logger.debug("Armed %s to fire in %.1fs", token, delay)
        return token

    def cancel(self, token: str) -> bool:
        """Disarm a pending timer.  Returns ``False`` if it already fired."""
        handle = self._pending.pop(token, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def close(self) -> None:
        """Disarm every pending timer."""
        for handle in self._pending.values():
            handle.cancel()
        if self._pending:
            logger.info("Discarded %d pending scheduled deliveries", len(self._pending))
        self._pending.clear()

    def _fire(self, token: str, action: Callable[[], object]) -> None:
        self._pending.pop(token, None)
        try:
            action()
        except Exception:
            logger.exception("Scheduled action %s failed", token)
