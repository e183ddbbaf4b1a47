from __future__ import annotations

import logging
from typing import Any, Optional

from loginbus.domain.entities import AlertSpec
from loginbus.domain.notifications import (
    ErrorReported,
    Event,
    LoginFailed,
    LoginSucceeded,
    LogoutSucceeded,
    parse_notification,
)
from loginbus.domain.ports import AlertPort, NotificationListener

log = logging.getLogger(__name__)

LOGIN_SUCCESS_ALERT = AlertSpec("Success", "Login successful!")
LOGIN_FAILED_ALERT = AlertSpec("Error", "Invalid username or password")


def describe_alert(event: Optional[Event]) -> Optional[AlertSpec]:
    """Map a notification event to the alert it should raise, if any."""
    if isinstance(event, LoginSucceeded):
        return LOGIN_SUCCESS_ALERT
    if isinstance(event, LoginFailed):
        return LOGIN_FAILED_ALERT
    return None


class NotificationReceiver(NotificationListener):
    """Listener that turns bus notifications into alerts, no I/O here."""

    def __init__(self, alerts: AlertPort) -> None:
        self.alerts = alerts

    def on_notification(self, name: str, data: Any = None) -> None:
        log.info("Received notification: %s", name)
        event = parse_notification(name, data)

        if isinstance(event, LoginSucceeded):
            log.info("Login successful!")
        elif isinstance(event, LoginFailed):
            log.info("Login failed: %s", event.message or "<no message>")
        elif isinstance(event, LogoutSucceeded):
            log.info("Logout successful!")
        elif isinstance(event, ErrorReported):
            # Not shown to the user until product confirms the wording.
            log.warning("Error notification: %s", event.message or "Unknown error")

        alert = describe_alert(event)
        if alert is not None:
            self.alerts.show_alert(alert.title, alert.message)

    def on_command_executed(self, name: str, data: Any = None) -> None:
        log.info("Command executed: %s", name)
