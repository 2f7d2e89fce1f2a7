"""
Contracts (Protocols) for Presence Relay.

These protocols define the seams between the session core and its
collaborators. Using Protocol enables structural subtyping - no
inheritance required.
"""

from .daemon import DaemonNotFound, DaemonSpawnError
from .host import BufferInfo, HostEvent, HostListener, HostProtocol
from .transport import RPCCallback, RPCResult, TransportFailure, TransportProtocol

__all__ = [
    "BufferInfo",
    "DaemonNotFound",
    "DaemonSpawnError",
    "HostEvent",
    "HostListener",
    "HostProtocol",
    "RPCCallback",
    "RPCResult",
    "TransportFailure",
    "TransportProtocol",
]
