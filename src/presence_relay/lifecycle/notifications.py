"""
Desktop Notifications - Optional system notifications for session notices.

Mirrors user-visible session notices (daemon missing, daemon died) to the
desktop via notify-send when available and enabled.
"""

import shutil
import subprocess
from enum import Enum
from typing import Callable

import structlog

__all__ = ["Notifier", "NotifyLevel"]

logger = structlog.get_logger(__name__)


class NotifyLevel(Enum):
    """Notification urgency level."""

    INFO = "low"
    WARNING = "normal"
    ERROR = "critical"


class Notifier:
    """Desktop notification sender.

    Callbacks always run, even when notify-send is missing; tests and
    hosts use them to observe notices.
    """

    def __init__(self, enabled: bool = True, app_name: str = "Presence Relay") -> None:
        self._enabled = enabled
        self._app_name = app_name
        self._notify_send = shutil.which("notify-send")
        self._callbacks: list[Callable[[str, str, NotifyLevel], None]] = []

        if enabled and not self._notify_send:
            logger.warning("notify_send_not_found", message="Desktop notifications disabled")

    @property
    def available(self) -> bool:
        """Check if notifications are available."""
        return self._enabled and self._notify_send is not None

    def add_callback(self, callback: Callable[[str, str, NotifyLevel], None]) -> None:
        """Add a callback invoked for every notification."""
        self._callbacks.append(callback)

    def send(
        self,
        title: str,
        message: str,
        level: NotifyLevel = NotifyLevel.INFO,
        icon: str | None = None,
    ) -> bool:
        """Send a desktop notification.

        Args:
            title: Notification title
            message: Notification body
            level: Urgency level
            icon: Optional icon name (default: dialog-information)

        Returns:
            True if notification was sent
        """
        for callback in self._callbacks:
            try:
                callback(title, message, level)
            except Exception as e:
                logger.warning("notification_callback_error", error=str(e))

        if not self.available:
            return False

        icon = icon or "dialog-information"

        try:
            cmd = [
                self._notify_send,
                f"--urgency={level.value}",
                f"--app-name={self._app_name}",
                f"--icon={icon}",
                title,
                message,
            ]

            subprocess.run(cmd, check=True, capture_output=True, timeout=5)
            logger.debug("notification_sent", title=title, level=level.name)
            return True

        except subprocess.TimeoutExpired:
            logger.warning("notification_timeout", title=title)
            return False
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning("notification_failed", title=title, error=str(e))
            return False

    def warning(self, title: str, message: str) -> bool:
        return self.send(title, message, NotifyLevel.WARNING, icon="dialog-warning")

    def error(self, title: str, message: str) -> bool:
        return self.send(title, message, NotifyLevel.ERROR, icon="dialog-error")
