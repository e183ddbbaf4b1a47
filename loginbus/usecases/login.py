from __future__ import annotations

from dataclasses import dataclass

from ..domain.notifications import (
    LoginFailed,
    LoginRequested,
    LoginSucceeded,
    Notification,
    parse_notification,
)
from ..domain.ports import NotificationBus, UseCaseError
from .user_proxy import UserProxy


@dataclass
class LoginCommand:
    """Handle ``loginRequest``: authenticate and report the outcome.

    Emits ``loginSuccess`` with ``{"username"}`` or ``loginFailed`` with
    ``{"message"}``. Login problems never surface as ``ERROR``.
    """

    user_proxy: UserProxy

    def __call__(self, bus: NotificationBus, notification: Notification) -> None:
        event = parse_notification(notification.name, notification.body)
        if not isinstance(event, LoginRequested):
            raise UseCaseError("BAD_NOTIFICATION", f"Unexpected notification {notification.name!r}")

        creds = event.credentials
        try:
            session = self.user_proxy.login(creds.username, creds.password)
        except UseCaseError as exc:
            bus.send(LoginFailed(message=exc.message))
            return
        bus.send(LoginSucceeded(username=session.username))
