"""Use case behind the refresh button.

Refreshing re-validates the session by exchanging the refresh token for a new
access token. Failures are raised as ``UseCaseError`` and reported by the
facade as an ``ERROR`` notification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..domain.notifications import Notification
from ..domain.ports import NotificationBus
from .user_proxy import UserProxy

log = logging.getLogger(__name__)


@dataclass
class DataRefreshCommand:
    user_proxy: UserProxy

    def __call__(self, bus: NotificationBus, notification: Notification) -> None:
        session = self.user_proxy.refresh()
        log.info("Session refreshed for %s", session.username)
