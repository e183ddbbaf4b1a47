import json

import pytest

from loginbus.adapters.storage_local import StorageLocal
from loginbus.viewmodels.settings_vm import SettingsVM


def test_user_settings_round_trip(tmp_path):
    storage = StorageLocal(root_dir=str(tmp_path))
    payload = {
        "base_url": "https://auth.example.com",
        "request_timeout_s": 5,
        "retry_on_status": [503],
        "debug_logging": True,
    }

    storage.save_user_settings(payload)
    loaded = storage.load_user_settings()

    assert loaded == payload


def test_user_settings_missing_file_and_save(tmp_path):
    storage = StorageLocal(root_dir=str(tmp_path))
    settings_path = tmp_path / "user_settings.json"

    assert storage.load_user_settings() is None
    assert not settings_path.exists()

    vm = SettingsVM()
    storage.save_user_settings(vm.to_dict())

    with settings_path.open("r", encoding="utf-8") as fh:
        persisted = json.load(fh)
    assert persisted == vm.to_dict()


def test_settings_vm_apply_dict_coerces_values():
    vm = SettingsVM()

    vm.apply_dict(
        {
            "base_url": " https://auth.example.com/ ",
            "request_timeout_s": "7",
            "max_retries": 1.0,
            "retry_delay_ms": 250,
            "retry_on_status": ["503", 429],
            "verify_ssl": "no",
            "auto_refresh_token": 0,
            "debug_logging": "yes",
        }
    )

    assert vm.base_url == "https://auth.example.com"
    assert vm.request_timeout_s == 7
    assert vm.max_retries == 1
    assert vm.config.retry_delay_ms == 250
    assert vm.config.retry_on_status == (503, 429)
    assert vm.verify_ssl is False
    assert vm.config.auto_refresh_token is False
    assert vm.debug_logging is True
    assert vm.is_valid()


def test_settings_vm_rejects_unknown_and_invalid_values():
    vm = SettingsVM()

    with pytest.raises(ValueError, match="Unsupported settings keys"):
        vm.apply_dict({"box_urls": {}})
    with pytest.raises(ValueError):
        vm.apply_dict({"request_timeout_s": -1})
    with pytest.raises(ValueError):
        vm.apply_dict({"retry_on_status": "401"})
    with pytest.raises(ValueError):
        vm.apply_dict({"retry_on_status": [99]})
    with pytest.raises(ValueError):
        vm.apply_dict({"max_retries": True})


def test_settings_vm_validity_and_save_callback():
    saved = []
    vm = SettingsVM(on_save=saved.append)

    assert not vm.is_valid()
    with pytest.raises(ValueError):
        vm.cmd_save()

    vm.base_url = "ftp://auth.example.com"
    assert not vm.is_valid()

    vm.base_url = "http://localhost:8000"
    vm.cmd_save()
    assert saved == [vm.to_dict()]
    assert saved[0]["retry_on_status"] == [401, 403, 503]

