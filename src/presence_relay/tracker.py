"""
Buffer Activity Tracker - Turn raw editor signals into activity edges.

Rules, evaluated in this order:
- typing: if already active in the same buffer, nothing. Otherwise latch
  active, remember the buffer and report activity right away.
- buffer changed: if the buffer differs from the last one seen, remember
  it and clear the latch.
- focus lost: clear the latch.

Buffer identity is BufferInfo.buffer_id. A language/mode change inside the
same buffer does not clear the latch.
"""

from collections.abc import Callable
from typing import Hashable

import structlog

from .contracts import HostEvent, HostProtocol
from .models import BufferActivitySnapshot

__all__ = ["BufferActivityTracker"]

logger = structlog.get_logger(__name__)


class BufferActivityTracker:
    """Owns the BufferActivitySnapshot and the host subscriptions.

    Example:
        tracker = BufferActivityTracker(host, on_activity=session.report_activity)
        tracker.subscribe()
    """

    def __init__(self, host: HostProtocol, on_activity: Callable[[], None]) -> None:
        self.host = host
        self.on_activity = on_activity
        self.snapshot = BufferActivitySnapshot()

        self._last_buffer_id: Hashable | None = None
        self._subscribed = False

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    @property
    def handlers(self) -> dict[HostEvent, Callable[[], None]]:
        return {
            HostEvent.TYPING: self.on_typing,
            HostEvent.BUFFER_CHANGED: self.on_buffer_changed,
            HostEvent.FOCUS_LOST: self.on_focus_lost,
        }

    def subscribe(self) -> None:
        """Register the three callbacks with the host."""
        if self._subscribed:
            return
        for event, handler in self.handlers.items():
            self.host.add_listener(event, handler)
        self._subscribed = True
        self._last_buffer_id = self._current_buffer_id()
        logger.debug("tracker_subscribed", buffer=self._last_buffer_id)

    def unsubscribe(self) -> None:
        """Deregister the callbacks. Safe when not subscribed."""
        if not self._subscribed:
            return
        for event, handler in self.handlers.items():
            self.host.remove_listener(event, handler)
        self._subscribed = False
        logger.debug("tracker_unsubscribed")

    def _current_buffer_id(self) -> Hashable | None:
        buffer = self.host.current_buffer()
        return buffer.buffer_id if buffer is not None else None

    # ─────────────────────────────────────────────────────────────────
    # Host signals
    # ─────────────────────────────────────────────────────────────────

    def on_typing(self) -> None:
        buffer_id = self._current_buffer_id()
        if self.snapshot.should_be_active and self.snapshot.active_buffer_id == buffer_id:
            return

        self.snapshot.should_be_active = True
        self.snapshot.active_buffer_id = buffer_id
        logger.debug("buffer_active", buffer=buffer_id)
        self.on_activity()

    def on_buffer_changed(self) -> None:
        buffer_id = self._current_buffer_id()
        if buffer_id == self._last_buffer_id:
            return

        self._last_buffer_id = buffer_id
        self.snapshot.should_be_active = False

    def on_focus_lost(self) -> None:
        self.snapshot.should_be_active = False

    # ─────────────────────────────────────────────────────────────────
    # Reported path bookkeeping (written by the session via these only)
    # ─────────────────────────────────────────────────────────────────

    def mark_reported(self, path: str) -> None:
        self.snapshot.last_reported_path = path

    def clear_reported(self) -> None:
        self.snapshot.last_reported_path = None

    def reset(self) -> None:
        """Forget everything; used when the session is torn down."""
        self.snapshot.reset()
        self._last_buffer_id = None
