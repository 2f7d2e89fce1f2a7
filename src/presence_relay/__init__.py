"""
Presence Relay - Editor activity reporter for a local rich-presence daemon.

Watches which file the user is editing and relays it, with a periodic
heartbeat, to a companion daemon over a small JSON RPC protocol.
"""

__version__ = "1.0.0"

from .config import RelayConfig, config
from .contracts import BufferInfo, HostEvent, HostProtocol
from .host import CallbackHost
from .models import SessionState
from .session import Session

__all__ = [
    "__version__",
    "BufferInfo",
    "CallbackHost",
    "HostEvent",
    "HostProtocol",
    "RelayConfig",
    "Session",
    "SessionState",
    "config",
]
