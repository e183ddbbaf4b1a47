"""Token providers plugged into :class:`loginbus.adapters.http_client.RetryingSession`."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional

from loginbus.adapters.api_errors import ApiError
from loginbus.domain.ports import TokenProvider

log = logging.getLogger(__name__)

RefreshFn = Callable[[str], Dict[str, Any]]


class SimpleTokenProvider(TokenProvider):
    """Thread-safe token holder without refresh support."""

    def __init__(self) -> None:
        self._access_token = ""
        self._refresh_token = ""
        self._lock = threading.Lock()

    def set_tokens(self, access: str, refresh: str) -> None:
        with self._lock:
            self._access_token = access or ""
            self._refresh_token = refresh or ""

    def get_access_token(self) -> str:
        with self._lock:
            return self._access_token

    def get_refresh_token(self) -> str:
        with self._lock:
            return self._refresh_token

    def refresh_access_token(self) -> Optional[str]:
        return None


class UserTokenProvider(SimpleTokenProvider):
    """Token holder that exchanges the refresh token through ``refresh_fn``.

    ``refresh_fn`` receives the current refresh token and returns the decoded
    JSON body of the refresh endpoint. It must not go through a session that
    uses this provider for auto refresh.
    """

    def __init__(self, refresh_fn: RefreshFn) -> None:
        super().__init__()
        self._refresh_fn = refresh_fn

    def refresh_access_token(self) -> Optional[str]:
        refresh_token = self.get_refresh_token()
        if not refresh_token:
            return None
        try:
            payload = self._refresh_fn(refresh_token)
        except ApiError as exc:
            log.warning("Token refresh failed: %s", exc)
            return None
        if not isinstance(payload, dict):
            return None

        new_access = payload.get("access_token") or ""
        new_refresh = payload.get("refresh_token") or ""
        if not isinstance(new_access, str) or not new_access:
            return None
        with self._lock:
            self._access_token = new_access
            if isinstance(new_refresh, str) and new_refresh:
                self._refresh_token = new_refresh
        return new_access


__all__ = ["SimpleTokenProvider", "UserTokenProvider"]
