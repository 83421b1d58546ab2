"""
Module: seerr_client.py
Description:
    Minimal JSON-over-HTTP client bound to a single Seerr API v1 resource
    (e.g. `blocklist`), with explicit error types for every failure class.

Usage:
    Imported by other modules; not intended to be executed directly.

Notes:
    - Authenticates every call with the `X-Api-Key` header.
    - Ignores $HTTP_PROXY/$HTTPS_PROXY and friends.
    - A non-2xx response raises `HTTPError` without reading the body.
"""

from __future__ import annotations

import json
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping
from urllib.parse import urlencode, urlsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection


class SeerrError(Exception):
    """Base class for every error raised by the Seerr client."""


class ConfigurationError(SeerrError):
    """Raised when the client cannot be built from the given settings."""


class SeerrRequestError(SeerrError):
    """Raised when the request never produced an HTTP response (DNS, connect, timeout...)."""


class SeerrEncodeError(SeerrError):
    """Raised when a request payload cannot be serialised to JSON."""


class SeerrDecodeError(SeerrError):
    """Raised when a successful response body is not valid JSON."""


class HTTPError(SeerrError):
    """
    Raised for any response with a status outside [200, 300).

    The response body is deliberately not included: Seerr error bodies are
    not guaranteed to be JSON nor to say anything useful.
    """

    def __init__(self, status_code: int, status: str, method: str, url: str):
        super().__init__(f"failed to {method} {url}: {status}")
        self.status_code = status_code
        self.status = status
        self.method = method
        self.url = url


class ResponseMode(Enum):
    """How a response body is handed back to the caller."""

    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class TransportConfig:
    """Network settings for the pooled session (seconds)."""

    connect_timeout: float = 30.0
    response_header_timeout: float = 10.0
    keepalive_idle: float = 60.0
    pool_maxsize: int = 10

    @property
    def timeout(self) -> tuple[float, float]:
        return self.connect_timeout, self.response_header_timeout

    def socket_options(self) -> list[tuple[int, int, int]]:
        options = list(HTTPConnection.default_socket_options)
        options.append((socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1))
        # Not available everywhere (e.g. macOS only has TCP_KEEPALIVE)
        if hasattr(socket, "TCP_KEEPIDLE"):
            options.append((socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, int(self.keepalive_idle)))
        if hasattr(socket, "TCP_KEEPINTVL"):
            options.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, int(self.keepalive_idle)))
        return options


class KeepAliveAdapter(HTTPAdapter):
    """HTTPAdapter whose pooled sockets use TCP keep-alive."""

    def __init__(self, transport: TransportConfig):
        self._socket_options = transport.socket_options()
        super().__init__(pool_connections=1, pool_maxsize=transport.pool_maxsize, max_retries=0)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["socket_options"] = self._socket_options
        super().init_poolmanager(*args, **kwargs)


def build_session(api_key: str, transport: TransportConfig) -> requests.Session:
    session = requests.Session()
    session.trust_env = False
    adapter = KeepAliveAdapter(transport)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"Connection": "keep-alive", "X-Api-Key": api_key})
    return session


class SeerrClient:
    """
    Client for one Seerr API v1 resource, e.g. `SeerrClient(host, key, "blocklist")`
    talks to `<host>/api/v1/blocklist`.
    """

    def __init__(
        self,
        host_url: str,
        api_key: str,
        endpoint: str,
        transport: TransportConfig | None = None,
    ):
        parts = urlsplit(host_url or "")
        if not parts.scheme or not parts.netloc:
            raise ConfigurationError(f"missing scheme/host in Seerr URL: {host_url!r}")

        host = f"{parts.scheme}://{parts.netloc}{parts.path.rstrip('/')}"
        self.base_url = f"{host}/api/v1/{endpoint.strip('/')}".rstrip("/")
        self.transport = transport or TransportConfig()
        self.session = build_session(api_key, self.transport)

    def __enter__(self) -> SeerrClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def url_for(self, endpoint: str = "", params: Mapping[str, Any] | None = None) -> str:
        url = self.base_url
        if endpoint:
            url = f"{url}/{endpoint.lstrip('/')}"
        if params:
            url = f"{url}?{urlencode(params, doseq=True)}"
        return url

    def _do(
        self,
        method: str,
        endpoint: str = "",
        params: Mapping[str, Any] | None = None,
        payload: Any = None,
        response: ResponseMode | None = None,
    ) -> Any:
        url = self.url_for(endpoint, params)

        headers = {}
        body = None
        if payload is not None:
            try:
                body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise SeerrEncodeError(
                    f"failed to serialise request body to JSON for {url}: {e}"
                ) from e
            headers["Content-Type"] = "application/json"
        if response is not None:
            headers["Accept"] = "application/json"

        try:
            resp = self.session.request(
                method, url, data=body, headers=headers, timeout=self.transport.timeout
            )
        except requests.RequestException as e:
            raise SeerrRequestError(f"failed to {method} {url}: {e}") from e

        with resp:
            if not 200 <= resp.status_code < 300:
                raise HTTPError(
                    status_code=resp.status_code,
                    status=f"{resp.status_code} {resp.reason or ''}".strip(),
                    method=method,
                    url=url,
                )

            if response is ResponseMode.TEXT:
                # Decoded as UTF-8 whatever charset the server declares
                return resp.content.decode("utf-8", errors="replace")
            if response is ResponseMode.JSON:
                try:
                    return resp.json()
                except ValueError as e:
                    raise SeerrDecodeError(
                        f"failed to decode JSON response from {url}: {e}"
                    ) from e
            return None

    def get(
        self,
        endpoint: str = "",
        params: Mapping[str, Any] | None = None,
        response: ResponseMode | None = ResponseMode.JSON,
    ) -> Any:
        return self._do("GET", endpoint, params, None, response)

    def post(
        self,
        endpoint: str = "",
        params: Mapping[str, Any] | None = None,
        payload: Any = None,
        response: ResponseMode | None = None,
    ) -> Any:
        return self._do("POST", endpoint, params, payload, response)

    def put(
        self,
        endpoint: str = "",
        params: Mapping[str, Any] | None = None,
        payload: Any = None,
        response: ResponseMode | None = None,
    ) -> Any:
        return self._do("PUT", endpoint, params, payload, response)

    def delete(
        self,
        endpoint: str = "",
        params: Mapping[str, Any] | None = None,
        payload: Any = None,
    ) -> None:
        self._do("DELETE", endpoint, params, payload, None)
