from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Dict, Optional

import requests

from loginbus.domain.ports import AuthPort

from .api_errors import (
    ApiClientError,
    ApiError,
    ApiParseError,
    ApiServerError,
    extract_error_hint,
    parse_error_message,
    parse_error_payload,
    status_message,
)
from .http_client import HttpConfig, RetryingSession
from .token_provider import UserTokenProvider

LOGIN_PATH = "/api/v1/auth/login"
REFRESH_PATH = "/api/v1/auth/refresh"


def stamp_request_time(headers: Dict[str, str]) -> None:
    headers["X-Request-Time"] = str(int(time.time()))


class AuthRestAdapter(AuthPort):
    """REST adapter for the login and token refresh endpoints."""

    def __init__(
        self,
        cfg: HttpConfig,
        *,
        auto_refresh_token: bool = True,
    ) -> None:
        if not cfg.base_url:
            raise ValueError("AuthRestAdapter requires a base URL")

        headers = {"Content-Type": "application/json", **cfg.default_headers}
        self.cfg = replace(cfg, default_headers=headers)
        self.tokens = UserTokenProvider(self.refresh)
        self.session = RetryingSession(self.cfg, token_provider=self.tokens)
        self.session.set_auto_refresh_token(auto_refresh_token)
        self.session.set_request_interceptor(stamp_request_time)

    def login(self, username: str, password: str) -> Dict[str, Any]:
        resp = self.session.post(
            LOGIN_PATH,
            json_body={"email": username, "password": password},
            auth=False,
        )
        self._ensure_ok(resp, "login")
        return self._json_object(resp, "login")

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        resp = self.session.post(
            REFRESH_PATH,
            json_body={"refresh_token": refresh_token},
            auth=False,
        )
        self._ensure_ok(resp, "refresh")
        return self._json_object(resp, "refresh")

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        self.tokens.set_tokens(access_token, refresh_token)
        self.session.set_access_token(access_token)
        self.session.set_refresh_token(refresh_token)

    def clear_tokens(self) -> None:
        self.tokens.set_tokens("", "")
        self.session.clear_tokens()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _json_object(resp: requests.Response, ctx: str) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiParseError(f"{ctx}: invalid JSON response", context=ctx) from exc
        if not isinstance(data, dict):
            raise ApiParseError(f"{ctx}: expected object response", payload=data, context=ctx)
        return data

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        if 200 <= resp.status_code < 300:
            return
        status = resp.status_code
        payload = parse_error_payload(resp)
        message = parse_error_message(payload, status_message(status))
        if 400 <= status < 500:
            raise ApiClientError(
                message,
                status=status,
                hint=extract_error_hint(payload),
                payload=payload,
                context=ctx,
            )
        if 500 <= status < 600:
            raise ApiServerError(message, status=status, payload=payload, context=ctx)
        raise ApiError(message, status=status, payload=payload, context=ctx)


__all__ = ["AuthRestAdapter", "LOGIN_PATH", "REFRESH_PATH", "stamp_request_time"]
