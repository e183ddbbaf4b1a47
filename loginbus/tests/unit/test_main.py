import io
import json

import pytest

from loginbus.app import main as app_main


def test_parse_args_defaults_to_sample_credentials():
    args = app_main._parse_args(["login"])

    assert args.actions == ["login"]
    assert args.username == "sample@gmail.com"
    assert args.password == "password123"
    assert args.settings is None


def test_parse_args_rejects_unknown_action():
    with pytest.raises(SystemExit):
        app_main._parse_args(["shutdown"])


@pytest.mark.parametrize("argv", [[], ["--save-settings"], ["login", "--save-settings"]])
def test_parse_args_requires_work_and_settings_dir(argv):
    with pytest.raises(SystemExit):
        app_main._parse_args(argv)


def test_console_alerts_format():
    stream = io.StringIO()

    app_main.ConsoleAlerts(stream).show_alert("Success", "Login successful!")

    assert stream.getvalue() == "[Success] Login successful!\n"


def test_run_without_base_url_fails():
    assert app_main.run(["logout"], alerts=app_main.ConsoleAlerts(io.StringIO())) == 2


def test_run_logout_and_refresh_without_network():
    stream = io.StringIO()

    code = app_main.run(
        ["logout", "refresh", "--base-url", "http://localhost:9"],
        alerts=app_main.ConsoleAlerts(stream),
    )

    assert code == 0
    assert stream.getvalue() == ""


def test_run_reads_settings_directory(tmp_path):
    (tmp_path / "user_settings.json").write_text(
        json.dumps({"base_url": "http://localhost:9", "max_retries": 0}),
        encoding="utf-8",
    )

    code = app_main.run(
        ["logout", "--settings", str(tmp_path)],
        alerts=app_main.ConsoleAlerts(io.StringIO()),
    )

    assert code == 0


def test_run_rejects_unknown_settings_keys(tmp_path):
    (tmp_path / "user_settings.json").write_text(
        json.dumps({"base_url": "http://localhost:9", "box_urls": {}}),
        encoding="utf-8",
    )

    assert app_main.run(["logout", "--settings", str(tmp_path)]) == 2


def test_run_saves_effective_settings(tmp_path):
    settings_path = tmp_path / "user_settings.json"
    settings_path.write_text(json.dumps({"max_retries": 1}), encoding="utf-8")

    code = app_main.run(
        ["--settings", str(tmp_path), "--save-settings", "--base-url", "https://auth.example.com/"]
    )

    assert code == 0
    saved = json.loads(settings_path.read_text(encoding="utf-8"))
    assert saved["base_url"] == "https://auth.example.com"
    assert saved["max_retries"] == 1
    assert saved["retry_on_status"] == [401, 403, 503]


def test_run_does_not_save_invalid_settings(tmp_path):
    code = app_main.run(["--settings", str(tmp_path), "--save-settings"])

    assert code == 2
    assert not (tmp_path / "user_settings.json").exists()
