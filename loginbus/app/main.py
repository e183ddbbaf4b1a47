"""Command-line entrypoint that drives the login screen actions."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence, TextIO

from ..adapters.storage_local import StorageLocal
from ..utils import logging as logging_utils
from ..viewmodels.login_vm import SAMPLE_PASSWORD, SAMPLE_USERNAME, LoginVM
from ..viewmodels.settings_vm import SettingsVM
from .controller import AppController

ACTIONS = ("login", "logout", "refresh")

log = logging.getLogger(__name__)


class ConsoleAlerts:
    """AlertPort that writes ``[title] message`` lines to a stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def show_alert(self, title: str, message: str) -> None:
        print(f"[{title}] {message}", file=self.stream)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI args for one run of login/logout/refresh actions."""
    parser = argparse.ArgumentParser(description="Run login screen actions against the auth API.")
    parser.add_argument("actions", nargs="*", metavar="ACTION",
                        help="zero or more of: " + ", ".join(ACTIONS))
    parser.add_argument("--settings", default=None,
                        help="directory holding user_settings.json")
    parser.add_argument("--save-settings", action="store_true",
                        help="write the effective settings back to the --settings directory")
    parser.add_argument("--base-url", default=None)
    parser.add_argument("--username", default=SAMPLE_USERNAME)
    parser.add_argument("--password", default=SAMPLE_PASSWORD)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)
    unknown = [action for action in args.actions if action not in ACTIONS]
    if unknown:
        parser.error(f"invalid action: {unknown[0]!r} (choose from " + ", ".join(ACTIONS) + ")")
    if args.save_settings and not args.settings:
        parser.error("--save-settings requires --settings")
    if not args.actions and not args.save_settings:
        parser.error("at least one ACTION or --save-settings is required")
    return args


def _load_settings(args: argparse.Namespace) -> SettingsVM:
    settings = SettingsVM()
    if args.settings:
        storage = StorageLocal(root_dir=os.path.abspath(args.settings))
        settings.on_save = storage.save_user_settings
        stored = storage.load_user_settings()
        if stored:
            settings.apply_dict(stored)
    if args.base_url:
        settings.base_url = args.base_url
    if args.debug:
        settings.debug_logging = True
    return settings


def run(argv: Optional[Sequence[str]] = None, *, alerts: Optional[ConsoleAlerts] = None) -> int:
    args = _parse_args(argv)
    logging_utils.configure_root()

    try:
        settings = _load_settings(args)
    except ValueError as exc:
        log.error("Invalid settings: %s", exc)
        return 2
    logging_utils.apply_preferences(settings.debug_logging)
    if not settings.is_valid():
        log.error("A http(s) base URL is required (--base-url or settings file).")
        return 2
    if args.save_settings:
        settings.cmd_save()
        log.info("Settings saved to %s", args.settings)

    controller = AppController(settings)
    controller.ensure_ready()
    vm = LoginVM(controller.facade, alerts or ConsoleAlerts())
    vm.username = args.username
    vm.password = args.password

    handlers = {
        "login": vm.on_login_button,
        "logout": vm.on_logout_button,
        "refresh": vm.on_refresh_button,
    }
    for action in args.actions:
        log.debug("Action: %s", action)
        handlers[action]()
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
