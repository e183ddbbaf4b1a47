"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations


from typing import Optional

from loginbus.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    extract_error_hint,
    status_message,
)
from loginbus.domain.ports import UseCaseError

_CLIENT_CODES = {
    401: "INVALID_CREDENTIALS",
    403: "ACCESS_FORBIDDEN",
    429: "TOO_MANY_ATTEMPTS",
}


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    Args:
        exc: Exception raised by an adapter or use case.
        default_code: Code used for exceptions outside the ``ApiError`` tree.
        default_message: Message used for such exceptions when ``str(exc)``
            is empty.

    Returns:
        UseCaseError carrying a stable code and a presentable message.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Request timed out. Check connection.")
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        code = _CLIENT_CODES.get(status)
        if code:
            return UseCaseError(code, _message_for(exc, status))
        hint = exc.hint or extract_error_hint(exc.payload)
        return UseCaseError("REQUEST_FAILED", _compose_error_message(_message_for(exc, status), hint))
    if isinstance(exc, ApiServerError):
        return UseCaseError("SERVER_ERROR", _message_for(exc, exc.status or 500))
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", str(exc))

    message = str(exc) or default_message or "Unexpected error."
    return UseCaseError(default_code, message)


def _message_for(exc: ApiError, status: int) -> str:
    text = str(exc).strip()
    if text:
        return text
    if status:
        return status_message(status)
    return "Request failed."


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if not hint_text or hint_text == base:
        return base
    return f"{base}: {hint_text}"


__all__ = ["map_api_error"]
