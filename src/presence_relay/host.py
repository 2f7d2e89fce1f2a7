"""
Callback Host - In-process implementation of HostProtocol.

Editor integrations feed their native hooks into emit(); the session
core only ever sees the HostProtocol surface.

Usage:
    host = CallbackHost(editor_name="myeditor")
    host.set_buffer(BufferInfo("main.py", path="/src/main.py", language="python"))
    host.emit(HostEvent.TYPING)
"""

from collections import defaultdict
from collections.abc import Callable

import structlog

from .contracts import BufferInfo, HostEvent, HostListener

__all__ = ["CallbackHost"]

logger = structlog.get_logger(__name__)


class CallbackHost:
    """Listener table, settable current buffer and a message sink."""

    def __init__(
        self,
        editor_name: str = "editor",
        on_message: Callable[[str], None] | None = None,
    ) -> None:
        self._editor_name = editor_name
        self._on_message = on_message
        self._listeners: dict[HostEvent, list[HostListener]] = defaultdict(list)
        self._buffer: BufferInfo | None = None
        self.messages: list[str] = []

    @property
    def editor_name(self) -> str:
        return self._editor_name

    def current_buffer(self) -> BufferInfo | None:
        return self._buffer

    def set_buffer(self, buffer: BufferInfo | None) -> None:
        """Change the current buffer without emitting anything."""
        self._buffer = buffer

    def switch_buffer(self, buffer: BufferInfo | None) -> None:
        """Change the current buffer and emit BUFFER_CHANGED."""
        self._buffer = buffer
        self.emit(HostEvent.BUFFER_CHANGED)

    def add_listener(self, event: HostEvent, callback: HostListener) -> None:
        self._listeners[event].append(callback)

    def remove_listener(self, event: HostEvent, callback: HostListener) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def listener_count(self, event: HostEvent | None = None) -> int:
        """Registered callbacks for one event, or for all events."""
        if event is not None:
            return len(self._listeners.get(event, []))
        return sum(len(v) for v in self._listeners.values())

    def emit(self, event: HostEvent) -> None:
        """Run every callback registered for event.

        A failing callback is logged and does not stop the others.
        """
        for callback in list(self._listeners.get(event, [])):
            try:
                callback()
            except Exception as e:
                logger.error("host_listener_error", host_event=event.value, error=str(e))

    def show_message(self, message: str) -> None:
        self.messages.append(message)
        if self._on_message is not None:
            self._on_message(message)
