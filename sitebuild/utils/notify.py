"""
Desktop notification and audible alert helpers.
"""

import click
from notifypy import Notify

from sitebuild.utils.logging import logger


class DesktopNotifier:
    """Sends desktop notifications through notify-py."""

    def __init__(self, application_name: str = "sitebuild") -> None:
        self.application_name = application_name

    def send(self, title: str, message: str) -> None:
        notification = Notify()
        notification.application_name = self.application_name
        notification.title = title
        notification.message = message
        notification.send(block=False)


def beep() -> None:
    """Ring the terminal bell."""
    click.echo("\a", nl=False, err=True)


def notify_safely(notifier: DesktopNotifier | None, title: str, message: str) -> bool:
    """
    Send a notification, logging back-end failures instead of raising.

    Returns:
        True if the notification was handed to the back-end
    """
    if notifier is None:
        return False
    try:
        notifier.send(title, message)
        return True
    except Exception as e:
        logger.warning(f"Desktop notification failed: {e}")
        return False
