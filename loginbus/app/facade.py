"""Notification bus that routes user actions to commands and results to listeners.

The facade keeps three registries: listeners (UI receivers), commands keyed
by notification name, and named proxies. ``send_notification`` delivers a
notification to every listener, runs the matching command, then reports the
command execution back to listeners.

Listener callbacks go through an injectable ``dispatch`` function so a UI
can marshal them onto its main thread (for example Tk ``after(0, fn)``).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..domain.entities import Credentials
from ..domain.notifications import (
    DataRefreshRequested,
    ErrorReported,
    Event,
    LoginRequested,
    LogoutRequested,
    Notification,
)
from ..domain.ports import ControllerPort, NotificationBus, NotificationListener, UseCaseError

log = logging.getLogger(__name__)

Command = Callable[[NotificationBus, Notification], None]
DispatchFn = Callable[[Callable[[], None]], None]


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class Facade(ControllerPort, NotificationBus):
    """Single entry point for actions, commands, proxies and listeners."""

    def __init__(self, *, dispatch: Optional[DispatchFn] = None) -> None:
        """Create an empty facade.

        Args:
            dispatch: Function that runs a zero-argument callback, used for
                every listener call. Defaults to calling it immediately.
        """
        self._dispatch = dispatch or _call_now
        self._listeners: List[NotificationListener] = []
        self._commands: Dict[str, Command] = {}
        self._proxies: Dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def register_listener(self, listener: NotificationListener) -> bool:
        """Add ``listener``; returns ``False`` if it was already registered."""
        if self.has_listener(listener):
            return False
        self._listeners.append(listener)
        return True

    def remove_listener(self, listener: NotificationListener) -> bool:
        for idx, existing in enumerate(self._listeners):
            if existing is listener:
                del self._listeners[idx]
                return True
        return False

    def has_listener(self, listener: NotificationListener) -> bool:
        return any(existing is listener for existing in self._listeners)

    # ------------------------------------------------------------------
    # Commands and proxies
    # ------------------------------------------------------------------
    def register_command(self, name: str, command: Command) -> None:
        self._commands[name] = command

    def remove_command(self, name: str) -> None:
        self._commands.pop(name, None)

    def has_command(self, name: str) -> bool:
        return name in self._commands

    def register_proxy(self, proxy: Any) -> None:
        self._proxies[proxy.name] = proxy

    def retrieve_proxy(self, name: str) -> Optional[Any]:
        return self._proxies.get(name)

    def remove_proxy(self, name: str) -> Optional[Any]:
        return self._proxies.pop(name, None)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def send(self, event: Event) -> None:
        self.send_notification(event.name, event.body())

    def send_notification(self, name: str, body: Any = None) -> None:
        log.debug("Notification %s", name)
        self._broadcast(name, body)

        command = self._commands.get(name)
        if command is None:
            return
        try:
            command(self, Notification(name, body))
        except UseCaseError as exc:
            log.warning("Command for %s failed: [%s] %s", name, exc.code, exc.message)
            self.send(ErrorReported(message=exc.message, code=exc.code))
            return
        self._report_executed(name, body)

    def _broadcast(self, name: str, body: Any) -> None:
        for listener in list(self._listeners):
            self._dispatch(lambda listener=listener: listener.on_notification(name, body))

    def _report_executed(self, name: str, body: Any) -> None:
        for listener in list(self._listeners):
            callback = getattr(listener, "on_command_executed", None)
            if callback is None:
                continue
            self._dispatch(lambda callback=callback: callback(name, body))

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------
    def login(self, username: str, password: str) -> None:
        self.send(LoginRequested(Credentials(username, password)))

    def logout(self) -> None:
        self.send(LogoutRequested())

    def refresh_data(self) -> None:
        self.send(DataRefreshRequested())


__all__ = ["Command", "DispatchFn", "Facade"]
