from __future__ import annotations

from typing import Optional

from loginbus.domain.ports import AlertPort, ControllerPort

from .notification_vm import NotificationReceiver

SAMPLE_USERNAME = "sample@gmail.com"
SAMPLE_PASSWORD = "password123"


class LoginVM:
    """Login screen state and the three button commands.

    The controller is injected; the receiver is registered on it once here,
    before any action can be forwarded. Forwarding does no validation.
    """

    def __init__(
        self,
        controller: ControllerPort,
        alerts: AlertPort,
        *,
        receiver: Optional[NotificationReceiver] = None,
    ) -> None:
        self.controller = controller
        self.receiver = receiver or NotificationReceiver(alerts)
        self.controller.register_listener(self.receiver)

        self.username: str = SAMPLE_USERNAME
        self.password: str = SAMPLE_PASSWORD

    # ---- Forwarding ----
    def submit_login(self, username: str, password: str) -> None:
        self.controller.login(username, password)

    def submit_logout(self) -> None:
        self.controller.logout()

    def request_refresh(self) -> None:
        self.controller.refresh_data()

    # ---- Button callbacks ----
    def on_login_button(self) -> None:
        self.submit_login(self.username, self.password)

    def on_logout_button(self) -> None:
        self.submit_logout()

    def on_refresh_button(self) -> None:
        self.request_refresh()
