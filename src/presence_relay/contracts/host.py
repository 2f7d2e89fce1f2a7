"""
Host Protocol - Contract for the editor embedding the client.

The host owns the editor-global event streams. The client registers
plain callbacks for three signals and reads the current buffer on demand.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Hashable, Protocol, runtime_checkable

__all__ = ["BufferInfo", "HostEvent", "HostListener", "HostProtocol"]


class HostEvent(Enum):
    """Editor signals the tracker subscribes to."""

    TYPING = "typing"
    BUFFER_CHANGED = "buffer_changed"
    FOCUS_LOST = "focus_lost"


@dataclass(frozen=True)
class BufferInfo:
    """Snapshot of the host's current buffer.

    Attributes:
        buffer_id: Host identity of the buffer (name, handle, ...)
        path: File path, or None for buffers not visiting a file
        language: Language/major-mode name
    """

    buffer_id: Hashable
    path: str | None = None
    language: str = ""


HostListener = Callable[[], None]


@runtime_checkable
class HostProtocol(Protocol):
    """Contract for the host editor.

    Example:
        class MyEditorHost:
            editor_name = "myeditor"

            def current_buffer(self) -> BufferInfo | None:
                return BufferInfo(buffer_id=buf.name, path=buf.file, language=buf.mode)
            ...
    """

    @property
    def editor_name(self) -> str:
        """Host name reported to the daemon."""
        ...

    def current_buffer(self) -> BufferInfo | None:
        """Return the focused buffer, or None if there is none."""
        ...

    def add_listener(self, event: HostEvent, callback: HostListener) -> None:
        """Register a callback for an editor signal."""
        ...

    def remove_listener(self, event: HostEvent, callback: HostListener) -> None:
        """Deregister a callback. Unknown callbacks are ignored."""
        ...

    def show_message(self, message: str) -> None:
        """Surface a user-visible message."""
        ...
