from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Mapping, Optional, Tuple

from ..utils.logging import env_debug


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    base_url: str = ""
    request_timeout_s: int = 10
    connect_timeout_s: int = 10
    max_retries: int = 3
    retry_delay_ms: int = 1000
    retry_on_status: Tuple[int, ...] = (401, 403, 503)
    verify_ssl: bool = True
    auto_refresh_token: bool = True


def _default_debug_logging() -> bool:
    return env_debug()


class SettingsVM:
    """Keeps connection settings state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save
        self.debug_logging: bool = _default_debug_logging()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def base_url(self) -> str:
        return self.config.base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        self.config = replace(self.config, base_url=self._coerce_url(value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: int) -> None:
        coerced = self._coerce_int("request_timeout_s", value, allow_negative=False)
        self.config = replace(self.config, request_timeout_s=coerced)

    @property
    def connect_timeout_s(self) -> int:
        return self.config.connect_timeout_s

    @connect_timeout_s.setter
    def connect_timeout_s(self, value: int) -> None:
        coerced = self._coerce_int("connect_timeout_s", value, allow_negative=False)
        self.config = replace(self.config, connect_timeout_s=coerced)

    @property
    def max_retries(self) -> int:
        return self.config.max_retries

    @max_retries.setter
    def max_retries(self, value: int) -> None:
        coerced = self._coerce_int("max_retries", value, allow_negative=False)
        self.config = replace(self.config, max_retries=coerced)

    @property
    def verify_ssl(self) -> bool:
        return self.config.verify_ssl

    @verify_ssl.setter
    def verify_ssl(self, value: bool) -> None:
        self.config = replace(self.config, verify_ssl=self._coerce_bool(value))

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        url = self.base_url
        if not url or not url.startswith(("http://", "https://")):
            return False
        if self.request_timeout_s <= 0 or self.connect_timeout_s <= 0:
            return False
        return True

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_flat_keys = {*SettingsConfig.__annotations__.keys(), "debug_logging"}
        unknown = set(payload.keys()) - allowed_flat_keys
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates = {}
        for cfg_key in SettingsConfig.__annotations__.keys():
            if cfg_key in payload:
                updates[cfg_key] = self._coerce_config_value(cfg_key, payload[cfg_key])

        if updates:
            self.config = replace(self.config, **updates)

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot["retry_on_status"] = list(self.config.retry_on_status)
        snapshot["debug_logging"] = bool(self.debug_logging)
        return snapshot

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key == "base_url":
            return self._coerce_url(raw)
        if key in {"request_timeout_s", "connect_timeout_s", "max_retries", "retry_delay_ms"}:
            return self._coerce_int(key, raw, allow_negative=False)
        if key in {"verify_ssl", "auto_refresh_token"}:
            return self._coerce_bool(raw)
        if key == "retry_on_status":
            return self._coerce_statuses(raw)
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_url(value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("base_url must be a string.")
        return value.strip().rstrip("/")

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, allow_negative: bool = True) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if not allow_negative and coerced < 0:
            raise ValueError(f"{name} must be non-negative.")
        return coerced

    @classmethod
    def _coerce_statuses(cls, value: Any) -> Tuple[int, ...]:
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
            raise ValueError("retry_on_status must be a list of HTTP status codes.")
        statuses = []
        for item in value:
            code = cls._coerce_int("retry_on_status", item, allow_negative=False)
            if not 100 <= code <= 599:
                raise ValueError(f"retry_on_status contains invalid status {code}.")
            statuses.append(code)
        return tuple(statuses)

