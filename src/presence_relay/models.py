"""
Session data model.

All state is in-memory and rebuilt on every client startup.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Hashable

__all__ = [
    "BufferActivitySnapshot",
    "ClientID",
    "SessionState",
    "client_id_for_process",
]

# Opaque per-instance identifier sent with every request
ClientID = str


def client_id_for_process() -> ClientID:
    """Derive the client identifier from the host process identity."""
    return str(os.getpid())


class SessionState(Enum):
    """Session lifecycle states.

    - DISABLED: no hooks subscribed, no timers running
    - AWAITING_DAEMON: liveness poll may be running, heartbeat is not
    - ACTIVE: heartbeat running, buffer hooks subscribed
    """

    DISABLED = "disabled"
    AWAITING_DAEMON = "awaiting_daemon"
    ACTIVE = "active"


@dataclass
class BufferActivitySnapshot:
    """What the tracker knows about recent buffer activity."""

    last_reported_path: str | None = None
    active_buffer_id: Hashable | None = None
    should_be_active: bool = False

    def reset(self) -> None:
        self.last_reported_path = None
        self.active_buffer_id = None
        self.should_be_active = False
