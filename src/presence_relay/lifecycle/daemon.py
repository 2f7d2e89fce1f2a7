"""
Daemon Manager - Make sure the daemon is up before a session starts.

Flow:
1. Probe with one `is_running` call; ready if it answers
2. Otherwise locate the executable (missing = configuration error)
3. Spawn it detached, once
4. Poll `is_running` every poll_interval until the first answer

Failed polls are expected while the daemon boots and just keep the
loop going. There is no retry limit; cancel() ends the wait.
"""

from collections.abc import Callable

import structlog

from ..config import RelayConfig
from ..contracts import DaemonNotFound, RPCResult, TransportProtocol
from .launcher import DaemonLauncher
from .timer import PeriodicTimer

__all__ = ["DaemonManager"]

logger = structlog.get_logger(__name__)


class DaemonManager:
    """Readiness check, spawn and liveness poll for the daemon.

    Example:
        manager = DaemonManager(config, transport)
        manager.ensure_daemon(on_ready=session.start_session, on_error=report)

        # Abandon the wait
        manager.cancel()
    """

    def __init__(
        self,
        config: RelayConfig,
        transport: TransportProtocol,
        launcher: DaemonLauncher | None = None,
    ) -> None:
        self.config = config
        self.transport = transport
        self.launcher = launcher or DaemonLauncher(config)

        self._poll_timer: PeriodicTimer | None = None
        self._on_ready: Callable[[], None] | None = None
        # Bumped by cancel(); continuations from older attempts are dropped
        self._attempt = 0
        self._spawned_pid: int | None = None

    @property
    def polling(self) -> bool:
        """True while the liveness poll timer is scheduled."""
        return self._poll_timer is not None and self._poll_timer.active

    @property
    def spawned_pid(self) -> int | None:
        """PID of the daemon started by the last attempt, if any."""
        return self._spawned_pid

    def ensure_daemon(
        self,
        on_ready: Callable[[], None],
        on_error: Callable[[DaemonNotFound], None],
    ) -> None:
        """Start a readiness attempt.

        Args:
            on_ready: Called once the daemon answers
            on_error: Called if the executable is missing or cannot start
        """
        self._attempt += 1
        attempt = self._attempt
        self._spawned_pid = None
        logger.debug("daemon_probe", attempt=attempt)

        self.transport.send(
            "is_running",
            callback=lambda result: self._after_probe(attempt, result, on_ready, on_error),
        )

    def _after_probe(
        self,
        attempt: int,
        result: RPCResult,
        on_ready: Callable[[], None],
        on_error: Callable[[DaemonNotFound], None],
    ) -> None:
        if attempt != self._attempt:
            return

        if result.ok:
            logger.info("daemon_reachable")
            on_ready()
            return

        try:
            path = self.launcher.require()
            self._spawned_pid = self.launcher.spawn(path)
        except DaemonNotFound as e:
            logger.error("daemon_unavailable", error=str(e))
            on_error(e)
            return

        self.start_polling(on_ready)

    def start_polling(self, on_ready: Callable[[], None]) -> bool:
        """Poll `is_running` until the daemon answers.

        Returns:
            False if a poll timer was already pending
        """
        if self.polling:
            return False

        self._on_ready = on_ready
        attempt = self._attempt
        self._poll_timer = PeriodicTimer(
            self.config.poll_interval,
            lambda: self._poll_tick(attempt),
            name="liveness_poll",
        )
        self._poll_timer.start()
        logger.info("daemon_poll_started", interval=self.config.poll_interval)
        return True

    def _poll_tick(self, attempt: int) -> None:
        self.transport.send(
            "is_running",
            callback=lambda result: self._after_poll(attempt, result),
        )

    def _after_poll(self, attempt: int, result: RPCResult) -> None:
        if attempt != self._attempt or not self.polling:
            return
        if not result.ok:
            return

        on_ready = self._on_ready
        polls = self._poll_timer.ticks if self._poll_timer else 0
        self.stop_polling()
        logger.info("daemon_ready", polls=polls)
        if on_ready is not None:
            on_ready()

    def stop_polling(self) -> None:
        """Cancel the poll timer if one is pending."""
        if self._poll_timer is not None:
            self._poll_timer.cancel()
            self._poll_timer = None
        self._on_ready = None

    def cancel(self) -> None:
        """Abandon the current attempt and stop polling."""
        self._attempt += 1
        self.stop_polling()
