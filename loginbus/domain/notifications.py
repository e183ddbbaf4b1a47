"""Notification names and the typed events carried on the controller bus.

Listeners receive ``(name, data)`` pairs where ``data`` is an untyped body.
:func:`parse_notification` turns such a pair into one of the frozen event
dataclasses below so callers can branch on type instead of downcasting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Union

from .entities import Credentials

LOGIN_REQUEST = "loginRequest"
LOGIN_SUCCESS = "loginSuccess"
LOGIN_FAILED = "loginFailed"
LOGOUT_REQUEST = "logoutRequest"
LOGOUT_SUCCESS = "logoutSuccess"
DATA_REFRESH = "dataRefresh"

# Ad-hoc name used for command failures; kept out of NOTIFICATION_NAMES.
ERROR = "ERROR"

NOTIFICATION_NAMES = (
    LOGIN_REQUEST,
    LOGIN_SUCCESS,
    LOGIN_FAILED,
    LOGOUT_REQUEST,
    LOGOUT_SUCCESS,
    DATA_REFRESH,
)


@dataclass(frozen=True)
class Notification:
    """Envelope delivered to commands: a name plus an optional body."""

    name: str
    body: Any = None


@dataclass(frozen=True)
class LoginRequested:
    name: ClassVar[str] = LOGIN_REQUEST
    credentials: Credentials

    def body(self) -> Dict[str, str]:
        return {
            "username": self.credentials.username,
            "password": self.credentials.password,
        }


@dataclass(frozen=True)
class LoginSucceeded:
    name: ClassVar[str] = LOGIN_SUCCESS
    username: str = ""

    def body(self) -> Dict[str, str]:
        return {"username": self.username}


@dataclass(frozen=True)
class LoginFailed:
    name: ClassVar[str] = LOGIN_FAILED
    message: str = ""

    def body(self) -> Dict[str, str]:
        return {"message": self.message}


@dataclass(frozen=True)
class LogoutRequested:
    name: ClassVar[str] = LOGOUT_REQUEST

    def body(self) -> None:
        return None


@dataclass(frozen=True)
class LogoutSucceeded:
    name: ClassVar[str] = LOGOUT_SUCCESS

    def body(self) -> None:
        return None


@dataclass(frozen=True)
class DataRefreshRequested:
    name: ClassVar[str] = DATA_REFRESH

    def body(self) -> None:
        return None


@dataclass(frozen=True)
class ErrorReported:
    name: ClassVar[str] = ERROR
    message: Optional[str] = None
    code: Optional[str] = None

    def body(self) -> Dict[str, Optional[str]]:
        return {"message": self.message, "code": self.code}


Event = Union[
    LoginRequested,
    LoginSucceeded,
    LoginFailed,
    LogoutRequested,
    LogoutSucceeded,
    DataRefreshRequested,
    ErrorReported,
]


def _text(data: Any, key: str) -> Optional[str]:
    if isinstance(data, Mapping):
        value = data.get(key)
        if isinstance(value, str):
            return value
    return None


def parse_notification(name: str, data: Any = None) -> Optional[Event]:
    """Build the typed event for ``name``; unknown names yield ``None``.

    Malformed bodies never raise. Missing fields fall back to empty defaults
    so listeners can still react to the notification name.
    """
    if name == LOGIN_REQUEST:
        if isinstance(data, Credentials):
            return LoginRequested(data)
        username = _text(data, "username") or ""
        password = _text(data, "password") or ""
        return LoginRequested(Credentials(username, password))
    if name == LOGIN_SUCCESS:
        return LoginSucceeded(username=_text(data, "username") or "")
    if name == LOGIN_FAILED:
        message = data if isinstance(data, str) else _text(data, "message")
        return LoginFailed(message=message or "")
    if name == LOGOUT_REQUEST:
        return LogoutRequested()
    if name == LOGOUT_SUCCESS:
        return LogoutSucceeded()
    if name == DATA_REFRESH:
        return DataRefreshRequested()
    if name == ERROR:
        return ErrorReported(message=_text(data, "message"), code=_text(data, "code"))
    return None


__all__ = [
    "DATA_REFRESH",
    "ERROR",
    "LOGIN_FAILED",
    "LOGIN_REQUEST",
    "LOGIN_SUCCESS",
    "LOGOUT_REQUEST",
    "LOGOUT_SUCCESS",
    "NOTIFICATION_NAMES",
    "DataRefreshRequested",
    "ErrorReported",
    "Event",
    "LoginFailed",
    "LoginRequested",
    "LoginSucceeded",
    "LogoutRequested",
    "LogoutSucceeded",
    "Notification",
    "parse_notification",
]
