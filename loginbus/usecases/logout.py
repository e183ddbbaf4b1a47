from __future__ import annotations

from dataclasses import dataclass

from ..domain.notifications import LogoutSucceeded, Notification
from ..domain.ports import NotificationBus
from .user_proxy import UserProxy


@dataclass
class LogoutCommand:
    user_proxy: UserProxy

    def __call__(self, bus: NotificationBus, notification: Notification) -> None:
        self.user_proxy.logout()
        bus.send(LogoutSucceeded())
