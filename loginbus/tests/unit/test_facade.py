from __future__ import annotations

from typing import Any, Callable, List, Tuple

import pytest

from loginbus.app.facade import Facade
from loginbus.domain.notifications import (
    DATA_REFRESH,
    ERROR,
    LOGIN_REQUEST,
    LOGIN_SUCCESS,
    LOGOUT_REQUEST,
    LoginSucceeded,
    Notification,
)
from loginbus.domain.ports import UseCaseError


class _Listener:
    def __init__(self) -> None:
        self.notifications: List[Tuple[str, Any]] = []
        self.executed: List[Tuple[str, Any]] = []

    def on_notification(self, name: str, data: Any = None) -> None:
        self.notifications.append((name, data))

    def on_command_executed(self, name: str, data: Any = None) -> None:
        self.executed.append((name, data))


class _NotificationOnlyListener:
    def __init__(self) -> None:
        self.names: List[str] = []

    def on_notification(self, name: str, data: Any = None) -> None:
        self.names.append(name)


def test_register_listener_is_idempotent() -> None:
    facade = Facade()
    listener = _Listener()

    assert facade.register_listener(listener) is True
    assert facade.register_listener(listener) is False
    facade.send_notification(LOGIN_SUCCESS, {"username": "bob"})

    assert listener.notifications == [(LOGIN_SUCCESS, {"username": "bob"})]


def test_remove_listener_stops_delivery() -> None:
    facade = Facade()
    listener = _Listener()
    facade.register_listener(listener)

    assert facade.remove_listener(listener) is True
    assert facade.remove_listener(listener) is False
    facade.send_notification(LOGIN_SUCCESS)

    assert listener.notifications == []
    assert not facade.has_listener(listener)


def test_login_action_runs_command_and_reports_execution() -> None:
    facade = Facade()
    listener = _Listener()
    facade.register_listener(listener)
    seen: List[Notification] = []

    def command(bus: Facade, notification: Notification) -> None:
        seen.append(notification)
        bus.send(LoginSucceeded(username="bob"))

    facade.register_command(LOGIN_REQUEST, command)
    facade.login("bob", "secret")

    assert seen == [Notification(LOGIN_REQUEST, {"username": "bob", "password": "secret"})]
    assert [name for name, _ in listener.notifications] == [LOGIN_REQUEST, LOGIN_SUCCESS]
    assert listener.executed == [(LOGIN_REQUEST, {"username": "bob", "password": "secret"})]


def test_logout_and_refresh_actions_send_request_names() -> None:
    facade = Facade()
    listener = _NotificationOnlyListener()
    facade.register_listener(listener)

    facade.logout()
    facade.refresh_data()

    assert listener.names == [LOGOUT_REQUEST, DATA_REFRESH]


def test_command_use_case_error_becomes_error_notification() -> None:
    facade = Facade()
    listener = _Listener()
    facade.register_listener(listener)

    def failing(bus: Facade, notification: Notification) -> None:
        raise UseCaseError("NOT_LOGGED_IN", "Not logged in.")

    facade.register_command(DATA_REFRESH, failing)
    facade.refresh_data()

    assert listener.notifications[-1] == (ERROR, {"message": "Not logged in.", "code": "NOT_LOGGED_IN"})
    assert listener.executed == []


def test_unexpected_command_errors_propagate() -> None:
    facade = Facade()

    def broken(bus: Facade, notification: Notification) -> None:
        raise RuntimeError("bug")

    facade.register_command(LOGOUT_REQUEST, broken)

    with pytest.raises(RuntimeError):
        facade.logout()


def test_listener_calls_go_through_dispatch() -> None:
    queued: List[Callable[[], None]] = []
    facade = Facade(dispatch=queued.append)
    listener = _Listener()
    facade.register_listener(listener)

    facade.send_notification(LOGIN_SUCCESS)
    assert listener.notifications == []

    for fn in queued:
        fn()
    assert listener.notifications == [(LOGIN_SUCCESS, None)]


def test_proxy_registry() -> None:
    class _Proxy:
        name = "UserProxy"

    facade = Facade()
    proxy = _Proxy()
    facade.register_proxy(proxy)

    assert facade.retrieve_proxy("UserProxy") is proxy
    assert facade.remove_proxy("UserProxy") is proxy
    assert facade.retrieve_proxy("UserProxy") is None


def test_command_registry() -> None:
    facade = Facade()
    facade.register_command(LOGIN_REQUEST, lambda bus, note: None)

    assert facade.has_command(LOGIN_REQUEST)
    facade.remove_command(LOGIN_REQUEST)
    assert not facade.has_command(LOGIN_REQUEST)
