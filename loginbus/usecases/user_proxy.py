"""Model-side holder of the user's authentication state.

The proxy is registered on the facade under :attr:`UserProxy.NAME` and is
driven by the login, logout and refresh commands. It talks to the auth API
only through :class:`loginbus.domain.ports.AuthPort`.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict

from ..adapters.api_errors import ApiParseError
from ..domain.entities import UserSession
from ..domain.ports import AuthPort, UseCaseError
from .error_mapping import map_api_error

log = logging.getLogger(__name__)


class UserProxy:
    NAME = "UserProxy"

    def __init__(self, auth_port: AuthPort) -> None:
        self.auth_port = auth_port
        self._session = UserSession()

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def session(self) -> UserSession:
        return self._session

    @property
    def is_logged_in(self) -> bool:
        return self._session.is_logged_in

    @property
    def username(self) -> str:
        return self._session.username

    def login(self, username: str, password: str) -> UserSession:
        """Authenticate and store the returned tokens.

        Raises:
            UseCaseError: When the request fails or the response cannot be used.
        """
        try:
            payload = self.auth_port.login(username, password)
        except ApiParseError as exc:
            self._session = replace(self._session, is_logged_in=False)
            raise UseCaseError("LOGIN_FAILED", f"Failed to parse response: {exc}") from exc
        except Exception as exc:
            self._session = replace(self._session, is_logged_in=False)
            raise map_api_error(exc, default_code="LOGIN_FAILED") from exc

        if not isinstance(payload, dict):
            self._session = replace(self._session, is_logged_in=False)
            raise UseCaseError(
                "LOGIN_FAILED",
                f"Failed to parse response: expected object, got {type(payload).__name__}",
            )

        self._session = UserSession(
            username=username,
            access_token=_str_field(payload, "access_token"),
            refresh_token=_str_field(payload, "refresh_token"),
            is_verified=bool(payload.get("is_verify", False)),
            is_logged_in=True,
        )
        self.auth_port.set_tokens(self._session.access_token, self._session.refresh_token)
        log.info("User %s logged in", username)
        return self._session

    def logout(self) -> None:
        self._session = replace(
            self._session,
            access_token="",
            refresh_token="",
            is_verified=False,
            is_logged_in=False,
        )
        self.auth_port.clear_tokens()
        log.info("User %s logged out", self._session.username or "<anonymous>")

    def refresh(self) -> UserSession:
        """Exchange the refresh token for a new access token."""
        if not self._session.is_logged_in or not self._session.refresh_token:
            raise UseCaseError("NOT_LOGGED_IN", "Not logged in.")
        try:
            payload = self.auth_port.refresh(self._session.refresh_token)
        except Exception as exc:
            raise map_api_error(exc, default_code="REFRESH_FAILED") from exc

        access_token = _str_field(payload, "access_token")
        if not access_token:
            raise UseCaseError("REFRESH_FAILED", "Refresh response did not include an access token.")
        refresh_token = _str_field(payload, "refresh_token") or self._session.refresh_token
        self._session = replace(
            self._session, access_token=access_token, refresh_token=refresh_token
        )
        self.auth_port.set_tokens(access_token, refresh_token)
        return self._session


def _str_field(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key) if isinstance(payload, dict) else None
    return value if isinstance(value, str) else ""


__all__ = ["UserProxy"]
