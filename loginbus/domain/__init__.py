"""Domain package exports for value objects and notification events."""

from .entities import AlertSpec, Credentials, UserSession
from .notifications import (
    DATA_REFRESH,
    ERROR,
    LOGIN_FAILED,
    LOGIN_REQUEST,
    LOGIN_SUCCESS,
    LOGOUT_REQUEST,
    LOGOUT_SUCCESS,
    NOTIFICATION_NAMES,
    Event,
    Notification,
    parse_notification,
)
from .ports import UseCaseError

__all__ = [
    "AlertSpec",
    "Credentials",
    "DATA_REFRESH",
    "ERROR",
    "Event",
    "LOGIN_FAILED",
    "LOGIN_REQUEST",
    "LOGIN_SUCCESS",
    "LOGOUT_REQUEST",
    "LOGOUT_SUCCESS",
    "NOTIFICATION_NAMES",
    "Notification",
    "UseCaseError",
    "UserSession",
    "parse_notification",
]
