"""
Daemon errors - Configuration problems that stop an enable attempt.
"""

from pathlib import Path

__all__ = ["DaemonNotFound", "DaemonSpawnError"]


class DaemonNotFound(Exception):
    """Raised when no daemon executable exists on the search path.

    Fatal to the enable attempt; the daemon has to be installed first.
    """

    def __init__(self, searched: list[Path], reason: str | None = None):
        self.searched = list(searched)
        self.reason = reason or "executable not found"
        locations = ", ".join(str(p) for p in self.searched) or "<empty search path>"
        super().__init__(f"Presence daemon unavailable ({self.reason}); searched: {locations}")


class DaemonSpawnError(DaemonNotFound):
    """Raised when the executable exists but could not be started."""

    def __init__(self, path: Path, error: OSError):
        self.path = path
        self.error = error
        super().__init__([path], reason=f"failed to start: {error}")
