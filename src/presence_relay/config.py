"""
Centralized configuration for Presence Relay.

Configuration sources (priority order):
1. Environment variables (PRESENCE_RELAY_*)
2. Default values

Environment variables:
- PRESENCE_RELAY_HOST: Daemon address (default: 127.0.0.1)
- PRESENCE_RELAY_PORT: Daemon port (default: 6553)
- PRESENCE_RELAY_ENDPOINT: RPC endpoint path (default: /rpc)
- PRESENCE_RELAY_EDITOR: Host editor name sent with every request (default: editor)
- PRESENCE_RELAY_REQUEST_TIMEOUT: Per-request timeout in seconds (default: 2.0)
- PRESENCE_RELAY_POLL_INTERVAL: Liveness poll interval in seconds (default: 1.0)
- PRESENCE_RELAY_HEARTBEAT_INTERVAL: Heartbeat interval in seconds (default: 15.0)
- PRESENCE_RELAY_DAEMON: Explicit path to the daemon executable
- PRESENCE_RELAY_DAEMON_NAME: Executable name to search for (default: presence-daemon)
- PRESENCE_RELAY_RUNTIME_DIR: Runtime directory (default: ~/.local/share/presence-relay)
- PRESENCE_RELAY_LOG_LEVEL: Log level (default: INFO)
- PRESENCE_RELAY_NOTIFICATIONS: Enable desktop notifications (default: false)
"""

import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

__all__ = ["RelayConfig", "config", "DEFAULT_RUNTIME_DIR"]

DEFAULT_RUNTIME_DIR = Path.home() / ".local/share/presence-relay"


def _get_env(key: str, default: str) -> str:
    """Get environment variable with PRESENCE_RELAY_ prefix."""
    return os.environ.get(f"PRESENCE_RELAY_{key}", default)


def _get_env_int(key: str, default: int) -> int:
    """Get integer environment variable."""
    return int(_get_env(key, str(default)))


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable."""
    return float(_get_env(key, str(default)))


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(f"PRESENCE_RELAY_{key}")
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes", "on")


def _get_env_path(key: str, default: Path | None) -> Path | None:
    """Get path environment variable."""
    val = os.environ.get(f"PRESENCE_RELAY_{key}")
    return Path(val).expanduser() if val else default


@dataclass(frozen=True)
class RelayConfig:
    """Immutable relay configuration."""

    host: str = _get_env("HOST", "127.0.0.1")
    port: int = _get_env_int("PORT", 6553)
    endpoint: str = _get_env("ENDPOINT", "/rpc")
    editor: str = _get_env("EDITOR", "editor")
    log_level: str = _get_env("LOG_LEVEL", "INFO")

    # Timing
    request_timeout: float = _get_env_float("REQUEST_TIMEOUT", 2.0)
    poll_interval: float = _get_env_float("POLL_INTERVAL", 1.0)
    heartbeat_interval: float = _get_env_float("HEARTBEAT_INTERVAL", 15.0)

    # Daemon executable
    daemon_path: Path | None = _get_env_path("DAEMON", None)
    daemon_name: str = _get_env("DAEMON_NAME", "presence-daemon")

    runtime_dir: Path = _get_env_path("RUNTIME_DIR", DEFAULT_RUNTIME_DIR)

    # Desktop notifications
    notifications_enabled: bool = _get_env_bool("NOTIFICATIONS", False)

    @property
    def daemon_url(self) -> str:
        """Full URL of the daemon RPC endpoint."""
        return f"http://{self.host}:{self.port}{self.endpoint}"

    @property
    def bin_dir(self) -> Path:
        """Directory the installer drops the daemon executable into."""
        return self.runtime_dir / "bin"

    @property
    def executable_name(self) -> str:
        """Daemon file name on this platform."""
        if sys.platform == "win32" and not self.daemon_name.endswith(".exe"):
            return f"{self.daemon_name}.exe"
        return self.daemon_name

    @property
    def daemon_candidates(self) -> list[Path]:
        """Ordered search path for the daemon executable."""
        candidates: list[Path] = []
        if self.daemon_path is not None:
            candidates.append(self.daemon_path)
        candidates.append(self.bin_dir / self.executable_name)
        found = shutil.which(self.daemon_name)
        if found:
            candidates.append(Path(found))
        return candidates


# Global singleton
config = RelayConfig()
