"""
Lifecycle - Daemon process management and session timers.

Handles:
- Locating and spawning the daemon detached from the host
- Liveness polling until the daemon answers
- Cooperative periodic timers (heartbeat, poll)
- Desktop notifications for session notices

Example:
    from presence_relay.lifecycle import DaemonManager

    manager = DaemonManager(config, transport)
    manager.ensure_daemon(on_ready=start, on_error=report)
"""

from .daemon import DaemonManager
from .launcher import DaemonLauncher, is_executable
from .notifications import Notifier, NotifyLevel
from .timer import PeriodicTimer

__all__ = [
    "DaemonLauncher",
    "DaemonManager",
    "Notifier",
    "NotifyLevel",
    "PeriodicTimer",
    "is_executable",
]
