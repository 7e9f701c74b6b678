"""Notification emission service."""

import logging
from datetime import UTC, datetime

from specforge.domain.interfaces import NotifierInterface
from specforge.domain.models import Notification, Severity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class LoggingNotifier(NotifierInterface):
    """Writes notifications to the specforge logger at a matching level."""

    def notify(self, notification: Notification) -> None:
        logger.log(
            _LOG_LEVELS[notification.severity],
            "%s: %s",
            notification.title,
            notification.description,
        )


class NotificationEmitter:
    """Emits notifications to a notifier.

    Provides one method per severity, handling timestamps. When no notifier
    is given, notifications go to the logging notifier.
    """

    def __init__(self, notifier: NotifierInterface | None = None) -> None:
        self._notifier = notifier if notifier is not None else LoggingNotifier()

    @property
    def notifier(self) -> NotifierInterface:
        return self._notifier

    def _emit(self, title: str, description: str, severity: Severity) -> None:
        self._notifier.notify(
            Notification(
                title=title,
                description=description,
                severity=severity,
                created_at=datetime.now(UTC).isoformat(),
            )
        )

    def info(self, title: str, description: str) -> None:
        self._emit(title, description, Severity.INFO)

    def success(self, title: str, description: str) -> None:
        self._emit(title, description, Severity.SUCCESS)

    def warning(self, title: str, description: str) -> None:
        self._emit(title, description, Severity.WARNING)

    def error(self, title: str, description: str) -> None:
        self._emit(title, description, Severity.ERROR)
