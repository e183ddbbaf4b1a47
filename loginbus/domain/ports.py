from __future__ import annotations
from typing import Any, Dict, Optional, Protocol


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


# ---- Ports (Hexagonal boundaries) ----
class AuthPort(Protocol):
    """Login/refresh operations against the auth REST API."""

    def login(self, username: str, password: str) -> Dict[str, Any]: ...  # {"access_token", "refresh_token", "is_verify"}
    def refresh(self, refresh_token: str) -> Dict[str, Any]: ...
    def set_tokens(self, access_token: str, refresh_token: str) -> None: ...
    def clear_tokens(self) -> None: ...


class TokenProvider(Protocol):
    """Source of bearer tokens for authenticated requests."""

    def get_access_token(self) -> str: ...
    def get_refresh_token(self) -> str: ...
    def refresh_access_token(self) -> Optional[str]: ...  # new access token or None


class NotificationListener(Protocol):
    """Receiver of bus notifications. ``on_command_executed`` is optional."""

    def on_notification(self, name: str, data: Any = None) -> None: ...


class AlertPort(Protocol):
    """Presents alerts to the user (dialog, toast, console...)."""

    def show_alert(self, title: str, message: str) -> None: ...


class NotificationBus(Protocol):
    """Broadcast surface handed to commands."""

    def send_notification(self, name: str, body: Any = None) -> None: ...
    def send(self, event: Any) -> None: ...  # typed event with ``name`` and ``body()``


class ControllerPort(Protocol):
    """Controller surface the action forwarder talks to."""

    def register_listener(self, listener: NotificationListener) -> bool: ...
    def login(self, username: str, password: str) -> None: ...
    def logout(self) -> None: ...
    def refresh_data(self) -> None: ...
