"""
Notifier adapters for the user-facing notification stream.
"""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from specforge.domain.interfaces import NotifierInterface
from specforge.domain.models import Notification, Severity

_BORDER_STYLES = {
    Severity.INFO: "blue",
    Severity.SUCCESS: "green",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}


class InMemoryNotifier(NotifierInterface):
    """Collects notifications in a list. Useful for tests."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]

    def by_severity(self, severity: Severity) -> list[Notification]:
        return [n for n in self.notifications if n.severity == severity]

    def clear(self) -> None:
        self.notifications.clear()


class ConsoleNotifier(NotifierInterface):
    """Renders notifications as rich panels; errors go to stderr."""

    def __init__(
        self, console: Console | None = None, error_console: Console | None = None
    ):
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)

    def notify(self, notification: Notification) -> None:
        content = Text(notification.description)
        panel = Panel(
            content,
            title=notification.title,
            border_style=_BORDER_STYLES[notification.severity],
            expand=False,
        )
        if notification.severity == Severity.ERROR:
            self.error_console.print(panel)
        else:
            self.console.print(panel)
