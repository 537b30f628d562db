"""Report notifications."""

from certscan.notifications.email import EmailNotifier, NotificationResult

__all__ = ["EmailNotifier", "NotificationResult"]
