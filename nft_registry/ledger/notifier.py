"""Fire-and-forget transfer notifications.

After ``transfer_from_notify`` has fully applied a transfer, the recipient is
told about it by invoking ``onDIP721Received`` on it. The call is scheduled on
the running asyncio loop and never awaited by the transfer, so:

- the transfer result is returned before the notification runs
- a slow, failing or re-entrant recipient cannot change that result
- a re-entrant call from the recipient sees the post-transfer state

The actual delivery (how a message reaches another principal) belongs to the
host and is injected as an async ``deliver(target, method, notification)``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from ..constants import NOTIFY_METHOD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferNotification:
    """Payload delivered to the recipient of a notified transfer."""

    caller: str
    from_: str
    token_id: int
    data: bytes


Deliver = Callable[[str, str, TransferNotification], Awaitable[Any]]


class TransferNotifier:
    """Schedules notification deliveries without waiting for them.

    Holds strong references to in-flight tasks until they finish so they are
    not garbage collected mid-flight. ``drain()`` waits for all of them, which
    is useful at shutdown and in tests.
    """

    method: str
    enabled: bool

    def __init__(
        self,
        deliver: Deliver | None = None,
        method: str = NOTIFY_METHOD,
        enabled: bool = True,
    ) -> None:
        self._deliver = deliver
        self.method = method
        self.enabled = enabled
        self._tasks: set[asyncio.Task[None]] = set()

    def dispatch(self, target: str, notification: TransferNotification) -> asyncio.Task[None] | None:
        """Schedule delivery to ``target`` and return immediately.

        Returns the scheduled task, or None when nothing was scheduled
        (disabled, no deliver hook, or no running event loop).
        """
        if not self.enabled or self._deliver is None:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(
                "No running event loop; dropping %s notification to %s for token %d",
                self.method, target, notification.token_id,
            )
            return None
        task = loop.create_task(self._deliver_quietly(self._deliver, target, notification))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver_quietly(
        self, deliver: Deliver, target: str, notification: TransferNotification
    ) -> None:
        try:
            await deliver(target, self.method, notification)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Best effort: the transfer has already completed
            logger.warning(
                "%s notification to %s for token %d failed: %s",
                self.method, target, notification.token_id, e,
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every in-flight notification to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
            self._tasks.difference_update([t for t in self._tasks if t.done()])
