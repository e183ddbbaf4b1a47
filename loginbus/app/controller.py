"""Adapter, proxy and command wiring for the login runtime.

This module owns lazy construction of the auth REST adapter, the user proxy
and the facade with its commands, all built from values in
:class:`loginbus.viewmodels.settings_vm.SettingsVM`.
"""

from __future__ import annotations

from typing import Optional

from ..adapters.auth_rest import AuthRestAdapter
from ..adapters.http_client import HttpConfig
from ..domain.notifications import DATA_REFRESH, LOGIN_REQUEST, LOGOUT_REQUEST
from ..usecases.login import LoginCommand
from ..usecases.logout import LogoutCommand
from ..usecases.refresh_data import DataRefreshCommand
from ..usecases.user_proxy import UserProxy
from ..viewmodels.settings_vm import SettingsVM
from .facade import DispatchFn, Facade


class AppController:
    """Create and cache the runtime facade from settings state.

    Call chain:
        ``loginbus.app.main`` creates one instance, calls ``ensure_ready``
        and hands :attr:`facade` to :class:`loginbus.viewmodels.login_vm.LoginVM`
        as its controller.
    """

    def __init__(self, settings_vm: SettingsVM, *, dispatch: Optional[DispatchFn] = None) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: State model containing the API URL, timeouts and
                retry preferences used to build the adapter.
            dispatch: Optional listener dispatcher forwarded to the facade.
        """
        self.settings_vm = settings_vm
        self.facade = Facade(dispatch=dispatch)
        self._auth_adapter: Optional[AuthRestAdapter] = None
        self._user_proxy: Optional[UserProxy] = None

    @property
    def auth_adapter(self) -> Optional[AuthRestAdapter]:
        return self._auth_adapter

    @property
    def user_proxy(self) -> Optional[UserProxy]:
        return self._user_proxy

    def http_config(self) -> HttpConfig:
        cfg = self.settings_vm.config
        return HttpConfig(
            base_url=cfg.base_url,
            connect_timeout_s=cfg.connect_timeout_s,
            read_timeout_s=cfg.request_timeout_s,
            verify_ssl=cfg.verify_ssl,
            max_retries=cfg.max_retries,
            retry_delay_s=cfg.retry_delay_ms / 1000.0,
            retry_on_status=tuple(cfg.retry_on_status),
        )

    def reset(self) -> None:
        """Drop the adapter, proxy and commands; listeners stay registered.

        Side Effects:
            The next ``ensure_ready`` call rebuilds everything from current
            settings values.
        """
        self._auth_adapter = None
        if self._user_proxy is not None:
            self.facade.remove_proxy(self._user_proxy.name)
        self._user_proxy = None
        for name in (LOGIN_REQUEST, LOGOUT_REQUEST, DATA_REFRESH):
            self.facade.remove_command(name)

    def ensure_ready(self) -> bool:
        """Ensure adapter, proxy and commands are wired into the facade.

        Returns:
            ``True`` when dependencies are available, ``False`` when the base
            URL is missing from settings.
        """
        if self._auth_adapter and self._user_proxy:
            return True
        if not self.settings_vm.base_url:
            return False

        self._auth_adapter = AuthRestAdapter(
            self.http_config(),
            auto_refresh_token=self.settings_vm.config.auto_refresh_token,
        )
        self._user_proxy = UserProxy(self._auth_adapter)
        self.facade.register_proxy(self._user_proxy)
        self.facade.register_command(LOGIN_REQUEST, LoginCommand(self._user_proxy))
        self.facade.register_command(LOGOUT_REQUEST, LogoutCommand(self._user_proxy))
        self.facade.register_command(DATA_REFRESH, DataRefreshCommand(self._user_proxy))
        return True
