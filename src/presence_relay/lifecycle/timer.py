"""
Periodic Timer - Cooperative repeating callback on the event loop.

Backs both the heartbeat and the liveness poll. A timer owns at most
one background task; starting an active timer is a no-op.
"""

import asyncio
from collections.abc import Callable

import structlog

__all__ = ["PeriodicTimer"]

logger = structlog.get_logger(__name__)


class PeriodicTimer:
    """Runs a synchronous callback every `interval` seconds.

    Example:
        timer = PeriodicTimer(15.0, session.heartbeat_tick, name="heartbeat")
        timer.start()

        # Later
        timer.cancel()
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        name: str = "timer",
        immediate: bool = False,
    ) -> None:
        """Initialize timer.

        Args:
            interval: Seconds between ticks
            callback: Function run on each tick
            name: Label used in log events
            immediate: Fire the first tick right away instead of after one interval
        """
        self.interval = interval
        self.callback = callback
        self.name = name
        self.immediate = immediate

        self._task: asyncio.Task | None = None
        self._ticks = 0

    @property
    def active(self) -> bool:
        """True while the background task is scheduled."""
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        """Number of ticks fired since construction."""
        return self._ticks

    def start(self) -> bool:
        """Schedule the background task.

        Returns:
            False if the timer was already active
        """
        if self.active:
            logger.debug("timer_already_active", timer=self.name)
            return False

        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("timer_started", timer=self.name, interval=self.interval)
        return True

    def cancel(self) -> None:
        """Cancel the background task. Safe to call repeatedly."""
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
            logger.debug("timer_cancelled", timer=self.name, ticks=self._ticks)
        self._task = None

    async def _run(self) -> None:
        """Background loop firing the callback."""
        if not self.immediate:
            await asyncio.sleep(self.interval)

        while True:
            self._ticks += 1
            try:
                self.callback()
            except Exception as e:
                logger.error("timer_callback_error", timer=self.name, error=str(e))
            await asyncio.sleep(self.interval)
