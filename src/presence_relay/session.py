"""
Session Controller - Presence session state machine.

States:
- DISABLED: nothing subscribed, no timers
- AWAITING_DAEMON: waiting for the daemon (probe, spawn, liveness poll)
- ACTIVE: heartbeat timer running, buffer hooks subscribed

Transitions:
- DISABLED → AWAITING_DAEMON: enable()
- AWAITING_DAEMON → ACTIVE: daemon answered `is_running`
- AWAITING_DAEMON → DISABLED: daemon executable missing (configuration error)
- ACTIVE → DISABLED: any `ping`/`set_path` failure (daemon presumed dead)
- ACTIVE → AWAITING_DAEMON: stop_session() without a disable request
- any → DISABLED: disable()

Every teardown bumps a generation counter. RPC continuations remember the
generation they were dispatched under and do nothing once it is stale, so
responses arriving after disable() are harmless.
"""

from typing import Any

import structlog

from .config import RelayConfig
from .contracts import DaemonNotFound, HostProtocol, RPCResult, TransportProtocol
from .lifecycle import DaemonManager, Notifier, NotifyLevel, PeriodicTimer
from .models import SessionState, client_id_for_process
from .tracker import BufferActivityTracker
from .transport import RPCTransport

__all__ = ["Session"]

logger = structlog.get_logger(__name__)

NOTICE_TITLE = "Presence Relay"


class Session:
    """One presence session bound to one host.

    All methods must run on the event loop thread; none of them block.

    Example:
        async with Session(host, config) as session:
            session.enable()
            ...
            session.disable()
    """

    def __init__(
        self,
        host: HostProtocol,
        config: RelayConfig | None = None,
        transport: TransportProtocol | None = None,
        daemon: DaemonManager | None = None,
        notifier: Notifier | None = None,
        client_id: str | None = None,
    ) -> None:
        self.config = config or RelayConfig()
        self.host = host

        if transport is None:
            transport = RPCTransport(
                self.config,
                client_id or client_id_for_process(),
                editor=host.editor_name,
            )
        self.transport = transport
        self.client_id = transport.client_id

        self.daemon = daemon or DaemonManager(self.config, self.transport)
        if notifier is None and self.config.notifications_enabled:
            notifier = Notifier(enabled=True)
        self.notifier = notifier
        self.tracker = BufferActivityTracker(host, on_activity=self.report_activity)

        self._state = SessionState.DISABLED
        self._heartbeat: PeriodicTimer | None = None
        self._generation = 0
        self._disable_requested = False
        self._closed = False

        self._log = logger.bind(client_id=self.client_id)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def heartbeat_active(self) -> bool:
        return self._heartbeat is not None and self._heartbeat.active

    @property
    def last_reported_path(self) -> str | None:
        return self.tracker.snapshot.last_reported_path

    # ─────────────────────────────────────────────────────────────────
    # Host entry points
    # ─────────────────────────────────────────────────────────────────

    def enable(self) -> bool:
        """Start waiting for the daemon, then go active.

        Returns:
            False if the session was not DISABLED
        """
        if self._closed:
            raise RuntimeError("Session is closed")
        if self._state is not SessionState.DISABLED:
            self._log.debug("enable_ignored", state=self._state.value)
            return False

        self._disable_requested = False
        self._generation += 1
        generation = self._generation
        self._state = SessionState.AWAITING_DAEMON
        self._log.info("session_enabling")

        self.daemon.ensure_daemon(
            on_ready=lambda: self._on_daemon_ready(generation),
            on_error=lambda error: self._on_daemon_missing(generation, error),
        )
        return True

    def disable(self) -> None:
        """Tell the daemon we are leaving and shut everything down.

        The leaving notice is fire-and-forget; its outcome never matters.
        """
        if self._state is not SessionState.DISABLED:
            self.transport.send("im_leaving")

        self._disable_requested = True
        self.daemon.cancel()
        self.stop_session()
        self.tracker.reset()
        self._log.info("session_disabled")

    async def close(self) -> None:
        """Disable and release the transport."""
        if self._closed:
            return
        self.disable()
        self._closed = True
        await self.transport.aclose()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    # ─────────────────────────────────────────────────────────────────
    # Session lifecycle
    # ─────────────────────────────────────────────────────────────────

    def start_session(self) -> None:
        """Subscribe buffer hooks and start the heartbeat."""
        if self._heartbeat is not None:
            self._heartbeat.cancel()
            self._heartbeat = None
        self.daemon.stop_polling()

        self.tracker.subscribe()
        self._heartbeat = PeriodicTimer(
            self.config.heartbeat_interval,
            self.heartbeat_tick,
            name="heartbeat",
            immediate=True,
        )
        self._heartbeat.start()
        self._state = SessionState.ACTIVE
        self._log.info("session_started", heartbeat_interval=self.config.heartbeat_interval)

    def stop_session(self) -> None:
        """Unsubscribe hooks and cancel the heartbeat.

        Lands in DISABLED when a disable was requested, otherwise goes
        back to AWAITING_DAEMON and polls until the daemon answers.
        """
        self.tracker.unsubscribe()
        if self._heartbeat is not None:
            self._heartbeat.cancel()
            self._heartbeat = None

        self._generation += 1

        if self._disable_requested:
            self._state = SessionState.DISABLED
        else:
            self._state = SessionState.AWAITING_DAEMON
            generation = self._generation
            # A poll left running would still answer to the old generation
            self.daemon.stop_polling()
            self.daemon.start_polling(lambda: self._on_daemon_ready(generation))

        self._log.info("session_stopped", state=self._state.value)

    def heartbeat_tick(self) -> None:
        """Report a changed path, then ping."""
        if self._state is not SessionState.ACTIVE:
            return
        self.report_path()
        self._send("ping")

    def report_path(self, force: bool = False) -> bool:
        """Dispatch `set_path` for the current buffer.

        The reported path is recorded before the request resolves so a
        second dispatch for the same path is never in flight.

        Args:
            force: Send even if the path was already reported

        Returns:
            True if a request was dispatched
        """
        buffer = self.host.current_buffer()
        if buffer is None or not buffer.path:
            return False
        if not force and buffer.path == self.tracker.snapshot.last_reported_path:
            return False

        self.tracker.mark_reported(buffer.path)
        self._send("set_path", {"path": buffer.path, "language": buffer.language})
        return True

    def report_activity(self) -> None:
        """Tracker callback: the user just started typing in a buffer."""
        if self._state is SessionState.ACTIVE:
            self.report_path(force=True)

    # ─────────────────────────────────────────────────────────────────
    # Continuations
    # ─────────────────────────────────────────────────────────────────

    def _send(self, method: str, params: dict[str, Any] | None = None) -> None:
        generation = self._generation
        self.transport.send(
            method,
            params,
            callback=lambda result: self._on_rpc_result(generation, result),
        )

    def _on_rpc_result(self, generation: int, result: RPCResult) -> None:
        if result.ok:
            return
        if generation != self._generation or self._state is not SessionState.ACTIVE:
            self._log.debug("stale_rpc_failure", method=result.method)
            return
        self._daemon_died(result)

    def _daemon_died(self, result: RPCResult) -> None:
        reason = result.failure.reason if result.failure else "no response"
        self._log.warning("daemon_died", method=result.method, reason=reason)

        self.tracker.reset()
        self._disable_requested = True
        self.daemon.cancel()
        self.stop_session()
        self._notice(
            "Presence daemon stopped responding; presence reporting turned off.",
            NotifyLevel.WARNING,
        )

    def _on_daemon_ready(self, generation: int) -> None:
        if generation != self._generation or self._state is not SessionState.AWAITING_DAEMON:
            return
        self.start_session()

    def _on_daemon_missing(self, generation: int, error: DaemonNotFound) -> None:
        if generation != self._generation:
            return

        self._generation += 1
        self._disable_requested = True
        self.daemon.cancel()
        self._state = SessionState.DISABLED
        self._notice(
            f"{error}. Install the presence daemon, then enable again.",
            NotifyLevel.ERROR,
        )

    def _notice(self, message: str, level: NotifyLevel) -> None:
        self.host.show_message(message)
        if self.notifier is None:
            return
        if level is NotifyLevel.ERROR:
            self.notifier.error(NOTICE_TITLE, message)
        else:
            self.notifier.warning(NOTICE_TITLE, message)

    def status(self) -> dict[str, Any]:
        """Current session status."""
        snapshot = self.tracker.snapshot
        return {
            "state": self._state.value,
            "client_id": self.client_id,
            "heartbeat_active": self.heartbeat_active,
            "polling": self.daemon.polling,
            "last_reported_path": snapshot.last_reported_path,
            "should_be_active": snapshot.should_be_active,
            "subscribed": self.tracker.subscribed,
        }
