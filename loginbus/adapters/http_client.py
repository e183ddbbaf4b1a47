"""Shared HTTP transport utilities for REST adapters.

This module provides a wrapper around ``requests.Session`` that owns the
timeout policy, retry behavior, default headers and bearer-token injection
for the auth API.

Dependencies:
    - ``requests`` for network I/O.
    - ``loginbus.adapters.api_errors`` for typed transport failures.
    - ``loginbus.domain.ports.TokenProvider`` for pluggable token sources.

Call context:
    - Constructed by :class:`loginbus.adapters.auth_rest.AuthRestAdapter`.
    - Used only inside adapter layer methods; use cases interact through ports.

Retry policy:
    A response whose status is listed in ``HttpConfig.retry_on_status`` is
    retried until ``max_retries`` extra attempts have been made. For 401/403
    on authenticated requests with a token provider and auto refresh enabled,
    the access token is refreshed and the request is retried immediately.
    Timeouts and connection failures share the same retry budget.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

import requests
from requests import exceptions as req_exc
from requests.structures import CaseInsensitiveDict

from loginbus.adapters.api_errors import ApiClientError, ApiTimeoutError
from loginbus.domain.ports import TokenProvider

log = logging.getLogger(__name__)

RequestInterceptor = Callable[[Dict[str, str]], None]

_AUTH_STATUSES = (401, 403)


@dataclass
class HttpConfig:
    """Connection, timeout and retry configuration for adapter HTTP calls.

    Attributes:
        base_url: Scheme and host prefix joined with request paths.
        connect_timeout_s: Connection timeout in seconds.
        read_timeout_s: Read timeout in seconds.
        verify_ssl: Whether TLS certificates are verified.
        max_retries: Number of retry attempts after the initial request.
        retry_delay_s: Pause before a retry that does not refresh tokens.
        retry_on_status: HTTP statuses that trigger a retry.
        default_headers: Headers merged into every request.
    """
    base_url: str = ""
    connect_timeout_s: float = 30
    read_timeout_s: float = 30
    verify_ssl: bool = True
    max_retries: int = 3
    retry_delay_s: float = 1.0
    retry_on_status: Tuple[int, ...] = (401, 403, 503)
    default_headers: Dict[str, str] = field(default_factory=dict)


class RetryingSession:
    """Shared requests wrapper with token injection and retry loops.

    This class is transport-only. Callers provide endpoint paths and decide
    how to map non-2xx responses into adapter errors.
    """

    def __init__(
        self,
        cfg: HttpConfig,
        *,
        token_provider: Optional[TokenProvider] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Create a retry-enabled session.

        Args:
            cfg: Shared connection, timeout and retry settings.
            token_provider: Optional source of access tokens and refreshes.
            sleep: Delay function used between retries.

        Side Effects:
            Creates a persistent ``requests.Session`` object.
        """
        self.session = requests.Session()
        self.cfg = cfg
        self._token_provider = token_provider
        self._access_token = ""
        self._refresh_token = ""
        self._auto_refresh = True
        self._interceptor: Optional[RequestInterceptor] = None
        self._token_lock = threading.Lock()
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Token management
    # ------------------------------------------------------------------
    def set_token_provider(self, provider: Optional[TokenProvider]) -> None:
        with self._token_lock:
            self._token_provider = provider

    def set_access_token(self, token: str) -> None:
        with self._token_lock:
            self._access_token = token or ""

    def set_refresh_token(self, token: str) -> None:
        with self._token_lock:
            self._refresh_token = token or ""

    def clear_tokens(self) -> None:
        with self._token_lock:
            self._access_token = ""
            self._refresh_token = ""

    @property
    def access_token(self) -> str:
        with self._token_lock:
            return self._access_token

    @property
    def refresh_token(self) -> str:
        with self._token_lock:
            return self._refresh_token

    def set_auto_refresh_token(self, enable: bool) -> None:
        self._auto_refresh = bool(enable)

    def set_request_interceptor(self, interceptor: Optional[RequestInterceptor]) -> None:
        """Install a callable that may mutate headers before each attempt."""
        self._interceptor = interceptor

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def set_default_header(self, key: str, value: str) -> None:
        self.remove_default_header(key)
        self.cfg.default_headers[key] = value

    def remove_default_header(self, key: str) -> None:
        lowered = key.lower()
        for existing in [k for k in self.cfg.default_headers if k.lower() == lowered]:
            del self.cfg.default_headers[existing]

    def set_timeout(self, connect_timeout_s: float, read_timeout_s: float) -> None:
        self.cfg.connect_timeout_s = connect_timeout_s
        self.cfg.read_timeout_s = read_timeout_s

    def set_ssl_verification(self, verify: bool) -> None:
        self.cfg.verify_ssl = bool(verify)

    def set_retry_config(
        self, max_retries: int, retry_delay_s: float, statuses: Sequence[int]
    ) -> None:
        self.cfg.max_retries = max(0, int(max_retries))
        self.cfg.retry_delay_s = max(0.0, float(retry_delay_s))
        self.cfg.retry_on_status = tuple(int(code) for code in statuses)

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------
    def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        return self.request("GET", path, params=params, headers=headers, auth=auth)

    def post(
        self,
        path: str,
        *,
        json_body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        """Send a JSON POST; ``json_body`` is serialized with ``json.dumps``."""
        return self.request("POST", path, json_body=json_body, headers=headers, auth=auth)

    def post_form(
        self,
        path: str,
        fields: Mapping[str, Any],
        *,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        return self.request(
            "POST",
            path,
            data=dict(fields),
            content_type="application/x-www-form-urlencoded",
            headers=headers,
            auth=auth,
        )

    def post_multipart(
        self,
        path: str,
        files: Dict[str, Any],
        *,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        return self.request("POST", path, files=files, headers=headers, auth=auth)

    def post_raw(
        self,
        path: str,
        body: str,
        content_type: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        return self.request(
            "POST", path, data=body, content_type=content_type, headers=headers, auth=auth
        )

    def put(
        self,
        path: str,
        *,
        json_body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        return self.request("PUT", path, json_body=json_body, headers=headers, auth=auth)

    def put_raw(
        self,
        path: str,
        body: str,
        content_type: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        return self.request(
            "PUT", path, data=body, content_type=content_type, headers=headers, auth=auth
        )

    def patch(
        self,
        path: str,
        *,
        json_body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        return self.request("PATCH", path, json_body=json_body, headers=headers, auth=auth)

    def delete(
        self,
        path: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        return self.request("DELETE", path, headers=headers, auth=auth)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Optional[Any] = None,
        data: Any = None,
        files: Optional[Dict[str, Any]] = None,
        content_type: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> requests.Response:
        """Send a request, applying the retry and token-refresh policy.

        Args:
            method: HTTP verb.
            path: Endpoint path joined with ``HttpConfig.base_url``, or an
                absolute URL.
            params: Optional query parameter mapping.
            json_body: Optional payload serialized to JSON text.
            data: Raw body or form mapping, ignored when ``json_body`` is set.
            files: Multipart mapping consumed by ``requests``.
            content_type: Explicit ``Content-Type`` for the body.
            headers: Per-request headers merged over the defaults.
            auth: Inject the bearer token and allow 401/403 retries.

        Returns:
            The last ``requests.Response`` received.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
            ApiClientError: If a token refresh triggered by 401/403 fails.
        """
        url = self._url(path)
        context = f"{method} {url}"
        body = data
        if json_body is not None:
            body = json.dumps(json_body)
            content_type = content_type or "application/json"

        attempt = 0
        while True:
            request_headers = self._prepare_headers(
                headers, content_type=content_type, auth=auth, multipart=bool(files)
            )
            if files:
                self._rewind(files)
            try:
                resp = self.session.request(
                    method,
                    url,
                    params=params,
                    data=body,
                    files=files,
                    headers=request_headers,
                    timeout=(self.cfg.connect_timeout_s, self.cfg.read_timeout_s),
                    verify=self.cfg.verify_ssl,
                )
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                if attempt >= self.cfg.max_retries:
                    raise ApiTimeoutError(f"Timeout contacting {url}", context=context) from exc
                attempt += 1
                log.warning("%s failed (%s); retry %d/%d", context, exc, attempt, self.cfg.max_retries)
                self._sleep(self.cfg.retry_delay_s)
                continue

            status = resp.status_code
            if not self._should_retry(status, attempt, auth=auth):
                return resp
            attempt += 1
            if status in _AUTH_STATUSES and self._auto_refresh and self._token_provider is not None:
                log.info("Token refresh needed for status code: %s", status)
                self._refresh_access_token(context)
                continue
            log.warning("%s returned HTTP %s; retry %d/%d", context, status, attempt, self.cfg.max_retries)
            self._sleep(self.cfg.retry_delay_s)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        base = (self.cfg.base_url or "").rstrip("/")
        if not base:
            raise ValueError("HttpConfig.base_url is not configured")
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{base}{path}"

    def _prepare_headers(
        self,
        headers: Optional[Mapping[str, str]],
        *,
        content_type: Optional[str],
        auth: bool,
        multipart: bool,
    ) -> Dict[str, str]:
        merged: CaseInsensitiveDict = CaseInsensitiveDict(self.cfg.default_headers)
        merged.update(headers or {})
        if multipart:
            # requests generates the boundary-bearing content type itself.
            merged.pop("Content-Type", None)
        elif content_type:
            merged["Content-Type"] = content_type
        if auth:
            token = self._current_access_token()
            if token:
                merged["Authorization"] = f"Bearer {token}"
        result = dict(merged)
        if self._interceptor is not None:
            self._interceptor(result)
        return result

    def _current_access_token(self) -> str:
        with self._token_lock:
            if self._token_provider is not None:
                return self._token_provider.get_access_token() or ""
            return self._access_token

    def _should_retry(self, status: int, attempt: int, *, auth: bool) -> bool:
        if attempt >= self.cfg.max_retries:
            return False
        if not auth and status in _AUTH_STATUSES:
            return False
        return status in self.cfg.retry_on_status

    def _refresh_access_token(self, context: str) -> None:
        provider = self._token_provider
        new_token = provider.refresh_access_token() if provider is not None else None
        if not new_token:
            raise ApiClientError("Token refresh failed", status=403, context=context)
        self.set_access_token(new_token)

    @staticmethod
    def _rewind(files: Dict[str, Any]) -> None:
        # Each attempt must send the full file payload from the beginning.
        for value in files.values():
            handle = None
            if hasattr(value, "seek"):
                handle = value
            elif isinstance(value, tuple) and len(value) >= 2:
                candidate = value[1]
                if hasattr(candidate, "seek"):
                    handle = candidate
            if handle is not None:
                handle.seek(0)


__all__ = ["HttpConfig", "RequestInterceptor", "RetryingSession"]
