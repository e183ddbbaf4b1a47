from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from loginbus.app.controller import AppController
from loginbus.domain.notifications import DATA_REFRESH, LOGIN_REQUEST, LOGOUT_REQUEST
from loginbus.usecases.user_proxy import UserProxy
from loginbus.viewmodels.login_vm import LoginVM
from loginbus.viewmodels.settings_vm import SettingsVM


class _ResponseStub:
    def __init__(self, status_code: int, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = ""

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class _SessionStub:
    def __init__(self, responses: Sequence[_ResponseStub]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _ResponseStub:
        self.calls.append({"method": method, "url": url, **kwargs})
        return self._responses.pop(0)


class _AlertRecorder:
    def __init__(self) -> None:
        self.alerts: List[Tuple[str, str]] = []

    def show_alert(self, title: str, message: str) -> None:
        self.alerts.append((title, message))


def _settings(base_url: str = "https://auth.example.com") -> SettingsVM:
    vm = SettingsVM()
    vm.base_url = base_url
    vm.apply_dict({"retry_delay_ms": 0})
    return vm


def _wired(responses: Sequence[_ResponseStub]) -> tuple:
    controller = AppController(_settings())
    assert controller.ensure_ready()
    stub = _SessionStub(responses)
    controller.auth_adapter.session.session = stub  # type: ignore[union-attr]
    alerts = _AlertRecorder()
    vm = LoginVM(controller.facade, alerts)
    return controller, vm, alerts, stub


def test_ensure_ready_requires_base_url() -> None:
    controller = AppController(SettingsVM())

    assert controller.ensure_ready() is False
    assert controller.auth_adapter is None
    assert not controller.facade.has_command(LOGIN_REQUEST)


def test_ensure_ready_wires_proxy_and_commands() -> None:
    controller = AppController(_settings())

    assert controller.ensure_ready() is True
    assert isinstance(controller.facade.retrieve_proxy(UserProxy.NAME), UserProxy)
    for name in (LOGIN_REQUEST, LOGOUT_REQUEST, DATA_REFRESH):
        assert controller.facade.has_command(name)
    adapter = controller.auth_adapter
    assert controller.ensure_ready() is True
    assert controller.auth_adapter is adapter


def test_http_config_follows_settings() -> None:
    settings = _settings("https://auth.example.com/")
    settings.apply_dict({"request_timeout_s": 4, "connect_timeout_s": 2, "retry_delay_ms": 250})

    cfg = AppController(settings).http_config()

    assert cfg.base_url == "https://auth.example.com"
    assert (cfg.connect_timeout_s, cfg.read_timeout_s) == (2, 4)
    assert cfg.retry_delay_s == 0.25
    assert cfg.retry_on_status == (401, 403, 503)


def test_reset_drops_commands_but_keeps_listeners() -> None:
    controller, vm, _, _ = _wired([])

    controller.reset()

    assert controller.user_proxy is None
    assert controller.facade.retrieve_proxy(UserProxy.NAME) is None
    assert not controller.facade.has_command(LOGIN_REQUEST)
    assert controller.facade.has_listener(vm.receiver)


def test_login_success_shows_success_alert() -> None:
    payload = {"access_token": "a", "refresh_token": "r", "is_verify": True}
    controller, vm, alerts, stub = _wired([_ResponseStub(200, payload)])

    vm.submit_login("bob@example.com", "pw")

    assert alerts.alerts == [("Success", "Login successful!")]
    assert controller.user_proxy.is_logged_in  # type: ignore[union-attr]
    assert controller.auth_adapter.session.access_token == "a"  # type: ignore[union-attr]
    assert stub.calls[0]["url"] == "https://auth.example.com/api/v1/auth/login"


def test_login_rejected_shows_error_alert() -> None:
    controller, vm, alerts, _ = _wired([_ResponseStub(401, {"detail": "Wrong password"})])

    vm.submit_login("bob@example.com", "bad")

    assert alerts.alerts == [("Error", "Invalid username or password")]
    assert not controller.user_proxy.is_logged_in  # type: ignore[union-attr]


def test_logout_shows_no_alert() -> None:
    payload = {"access_token": "a", "refresh_token": "r"}
    controller, vm, alerts, stub = _wired([_ResponseStub(200, payload)])
    vm.submit_login("bob@example.com", "pw")

    vm.submit_logout()

    assert alerts.alerts == [("Success", "Login successful!")]
    assert controller.auth_adapter.session.access_token == ""  # type: ignore[union-attr]
    assert len(stub.calls) == 1


def test_refresh_while_logged_out_reports_error_without_alert() -> None:
    _, vm, alerts, stub = _wired([])

    vm.request_refresh()

    assert alerts.alerts == []
    assert stub.calls == []


def test_refresh_after_login_exchanges_refresh_token() -> None:
    controller, vm, alerts, stub = _wired(
        [
            _ResponseStub(200, {"access_token": "a", "refresh_token": "r"}),
            _ResponseStub(200, {"access_token": "a2"}),
        ]
    )
    vm.submit_login("bob@example.com", "pw")

    vm.request_refresh()

    assert stub.calls[1]["url"] == "https://auth.example.com/api/v1/auth/refresh"
    assert controller.user_proxy.session.access_token == "a2"  # type: ignore[union-attr]
    assert controller.user_proxy.session.refresh_token == "r"  # type: ignore[union-attr]
    assert alerts.alerts == [("Success", "Login successful!")]
