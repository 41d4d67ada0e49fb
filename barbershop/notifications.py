"""
Fire-and-forget client notifications.

Delivery is permission-gated and never awaited for correctness: a failed
send is logged and dropped, and no booking outcome depends on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from barbershop.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    body: str


class Notifier:
    """Base notifier. Subclasses implement ``_deliver``."""

    def __init__(self, permission_granted: bool = settings.notifications.enabled) -> None:
        self.permission_granted = permission_granted

    def grant_permission(self) -> None:
        self.permission_granted = True

    def revoke_permission(self) -> None:
        self.permission_granted = False

    def notify(self, title: str, body: str) -> None:
        if not self.permission_granted:
            logger.debug("Notification suppressed (no permission): %s", title)
            return
        try:
            self._deliver(Notification(title=title, body=body))
        except Exception:
            logger.warning("Notification delivery failed: %s", title, exc_info=True)

    def _deliver(self, notification: Notification) -> None:
        raise NotImplementedError


class LogNotifier(Notifier):
    """Writes notifications to the application log."""

    def _deliver(self, notification: Notification) -> None:
        logger.info("Notification: %s - %s", notification.title, notification.body)


class RecordingNotifier(Notifier):
    """Keeps delivered notifications in memory."""

    def __init__(self, permission_granted: bool = True) -> None:
        super().__init__(permission_granted)
        self.sent: list[Notification] = []

    def _deliver(self, notification: Notification) -> None:
        self.sent.append(notification)


class WebhookNotifier(Notifier):
    """POSTs each notification as JSON to a webhook URL."""

    def __init__(
        self,
        url: str = settings.notifications.webhook_url,
        *,
        timeout_seconds: float = settings.notifications.timeout_sec,
        permission_granted: bool = settings.notifications.enabled,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(permission_granted)
        self.url = url
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def _deliver(self, notification: Notification) -> None:
        if not self.url:
            logger.debug("No webhook URL configured; dropping %s", notification.title)
            return
        r = self._client.post(
            self.url, json={"title": notification.title, "body": notification.body}
        )
        r.raise_for_status()
