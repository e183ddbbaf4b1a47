from __future__ import annotations

from typing import Any, Dict, Optional


class ApiError(RuntimeError):
    """Base class for REST adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the auth API."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            hint=hint,
            payload=payload,
            context=context,
        )


class ApiServerError(ApiError):
    """HTTP 5xx from the auth API."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            payload=payload,
            context=context,
        )


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context)


class ApiParseError(ApiError):
    """2xx response whose body is not the expected JSON object."""

    def __init__(
        self,
        message: str,
        *,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, payload=payload, context=context)


STATUS_MESSAGES: Dict[int, str] = {
    400: "Bad request",
    401: "Invalid credentials",
    403: "Access forbidden",
    404: "Login endpoint not found",
    429: "Too many login attempts",
    500: "Server error",
}

_ERROR_FIELDS = ("error", "message", "detail", "error_description", "msg")
_NESTED_ERROR_FIELDS = ("message", "detail", "description")


def status_message(status: int) -> str:
    """Return the fixed message for ``status`` or ``"Error <status>"``."""
    return STATUS_MESSAGES.get(status, f"Error {status}")


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of error payload without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def parse_error_message(payload: Any, default: str = "Error occurred") -> str:
    """Pick a human readable message out of common error payload shapes.

    Flat string fields are checked first (``error``, ``message``, ``detail``,
    ``error_description``, ``msg``), then a nested ``error`` object.
    """
    if not isinstance(payload, dict):
        return default
    for key in _ERROR_FIELDS:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    nested = payload.get("error")
    if isinstance(nested, dict):
        for key in _NESTED_ERROR_FIELDS:
            value = nested.get(key)
            if isinstance(value, str) and value:
                return value
    return default


def extract_error_hint(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        for key in ("hint", "details", "errors"):
            if key not in payload:
                continue
            text = stringify(payload[key])
            if text:
                return text
    if isinstance(payload, list):
        return stringify(payload)
    if isinstance(payload, str):
        return payload.strip() or None
    return None


def stringify(data: Any, *, limit: int = 200) -> Optional[str]:
    if data is None:
        return None
    if isinstance(data, str):
        cleaned = data.strip()
        return cleaned[:limit] if cleaned else None
    if isinstance(data, list):
        parts = []
        for item in data:
            text = stringify(item, limit=limit)
            if text:
                parts.append(text)
            if len(parts) >= 3:
                break
        if not parts:
            return None
        joined = "; ".join(parts)
        return joined[:limit]
    if isinstance(data, dict):
        pairs = []
        for key, value in list(data.items())[:4]:
            value_text = stringify(value, limit=limit)
            if value_text:
                pairs.append(f"{key}={value_text}")
        if not pairs:
            return None
        joined = ", ".join(pairs)
        return joined[:limit]
    text = str(data).strip()
    return text[:limit] if text else None
