"""
Daemon Launcher - Locate and spawn the presence daemon.

Handles:
- Searching the configured locations for the executable
- Spawning it detached so it outlives the host process
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import structlog

from ..config import RelayConfig
from ..contracts import DaemonNotFound, DaemonSpawnError

__all__ = ["DaemonLauncher", "is_executable"]

logger = structlog.get_logger(__name__)


def is_executable(path: Path) -> bool:
    """Check that path is a regular file we are allowed to execute."""
    return path.is_file() and os.access(path, os.X_OK)


class DaemonLauncher:
    """Finds and starts the daemon executable.

    Example:
        launcher = DaemonLauncher(config)
        path = launcher.locate()
        if path is not None:
            launcher.spawn(path)
    """

    def __init__(self, config: RelayConfig) -> None:
        self.config = config

    @property
    def search_path(self) -> list[Path]:
        """Locations checked, in order."""
        return self.config.daemon_candidates

    def locate(self) -> Path | None:
        """Return the first executable on the search path, or None."""
        for candidate in self.search_path:
            if is_executable(candidate):
                return candidate
        return None

    def require(self) -> Path:
        """Like locate(), but raise when nothing was found.

        Raises:
            DaemonNotFound: If no candidate is executable
        """
        path = self.locate()
        if path is None:
            raise DaemonNotFound(self.search_path)
        return path

    def spawn(self, path: Path) -> int:
        """Start the daemon detached from this process.

        No arguments and no stdin; output is discarded.

        Returns:
            PID of the spawned process

        Raises:
            DaemonSpawnError: If the OS refused to start it
        """
        kwargs: dict[str, Any] = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
            "close_fds": True,
        }
        if sys.platform == "win32":
            kwargs["creationflags"] = (
                subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
            )
        else:
            kwargs["start_new_session"] = True

        try:
            process = subprocess.Popen([str(path)], **kwargs)
        except OSError as e:
            logger.error("daemon_spawn_failed", path=str(path), error=str(e))
            raise DaemonSpawnError(path, e) from e

        logger.info("daemon_spawned", path=str(path), pid=process.pid)
        return process.pid
