"""Value objects shared by the controller bus, the user proxy and the views."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """Username/password pair scoped to a single login request."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class UserSession:
    """Authentication state held by :class:`loginbus.usecases.user_proxy.UserProxy`.

    Attributes:
        username: Login name of the last successful (or attempted) login.
        access_token: Bearer token injected into authenticated requests.
        refresh_token: Token exchanged for a new access token on refresh.
        is_verified: Server-side verification flag (``is_verify`` in payloads).
        is_logged_in: Whether the last login succeeded and no logout followed.
    """

    username: str = ""
    access_token: str = ""
    refresh_token: str = ""
    is_verified: bool = False
    is_logged_in: bool = False


@dataclass(frozen=True)
class AlertSpec:
    """Description of an alert the UI should present."""

    title: str
    message: str
