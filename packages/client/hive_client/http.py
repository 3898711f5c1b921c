"""
HTTP access to the Hive backend.

Wraps a single ``httpx.AsyncClient`` and turns every failure (transport error,
HTTP error status, undecodable body) into a ``HiveClientError`` subclass so
callers only have one family of exceptions to handle.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence, Union
from urllib.parse import urlencode

import httpx
import structlog

log = structlog.get_logger()

QueryValue = Union[str, int, float, None]
Query = Mapping[str, Union[QueryValue, Sequence[QueryValue]]]

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class HiveClientError(Exception):
    """Base class for everything the client raises."""


class ConfigurationError(HiveClientError):
    """A required setting (base URL, audit endpoint) is missing."""


class ApiError(HiveClientError):
    """The backend could not be reached or answered with an error status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class MalformedResponseError(HiveClientError):
    """The backend answered 2xx but the body is not what the endpoint promises."""


# ---------------------------------------------------------------------------
# URL building
# ---------------------------------------------------------------------------

def _query_pairs(query: Query | None) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for key, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, str(item)) for item in value if item is not None)
        elif value != "":
            pairs.append((key, str(value)))
    return pairs


def build_url(base: str, path: str = "", query: Query | None = None) -> str:
    """Join ``base`` and ``path`` and append the non-empty query values.

    ``None`` and ``""`` values are dropped; list values become repeated keys.
    An absolute ``path`` ignores ``base``.
    """
    if _ABSOLUTE_URL.match(path):
        url = path
    else:
        base = base.rstrip("/")
        path = path.lstrip("/")
        url = f"{base}/{path}" if path else base

    pairs = _query_pairs(query)
    if not pairs:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(pairs)}"


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class HttpClient:
    """
    JSON-over-HTTP client for one backend base URL.

    Usable as an async context manager or via explicit ``open()``/``close()``.
    """

    def __init__(
        self,
        base_url: str,
        bearer_token: str | None = None,
        request_timeout: float | None = 30,
        verify_tls: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not base_url:
            raise ConfigurationError("Backend base URL is not configured")
        self._base_url = base_url.rstrip("/")
        self._bearer_token = bearer_token
        self._request_timeout = request_timeout
        self._verify_tls = verify_tls
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def open(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._request_timeout),
            verify=self._verify_tls,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpClient":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def url_for(self, path_or_url: str, query: Query | None = None) -> str:
        return build_url(self._base_url, path_or_url, query)

    def _headers(self, *, with_body: bool = False) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Cache-Control": "no-store",
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        if self._bearer_token:
            headers["Authorization"] = f"Bearer {self._bearer_token}"
        return headers

    async def get_json(self, path_or_url: str, query: Query | None = None) -> Any:
        """GET a URL (or a path under the base URL) and decode the JSON body."""
        url = self.url_for(path_or_url, query)
        response = await self._send("GET", url, headers=self._headers())
        return _decode(response)

    async def post_json(
        self,
        path: str,
        body: Any = None,
        query: Query | None = None,
    ) -> Any:
        """POST a JSON body. A 204 answer decodes to an empty dict."""
        return await self._send_json("POST", path, body, query)

    async def patch_json(
        self,
        path: str,
        body: Any = None,
        query: Query | None = None,
    ) -> Any:
        """PATCH with a JSON merge body."""
        return await self._send_json("PATCH", path, body, query)

    async def delete(self, path: str, query: Query | None = None) -> None:
        url = self.url_for(path, query)
        await self._send("DELETE", url, headers=self._headers())

    async def _send_json(
        self,
        method: str,
        path: str,
        body: Any,
        query: Query | None,
    ) -> Any:
        url = self.url_for(path, query)
        response = await self._send(
            method,
            url,
            headers=self._headers(with_body=True),
            json=body if body is not None else {},
        )
        if response.status_code == 204:
            return {}
        return _decode(response)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._client is None:
            await self.open()
        assert self._client

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            log.warning("http.request_failed", method=method, url=url, error=str(exc))
            raise ApiError(f"Request failed ({exc.__class__.__name__})") from exc

        if response.is_success:
            return response

        message = response.text.strip()
        log.warning(
            "http.error_status",
            method=method,
            url=url,
            status=response.status_code,
        )
        raise ApiError(
            message or f"Request failed ({response.status_code} {response.reason_phrase})",
            status=response.status_code,
        )


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponseError(
            f"Response from {response.request.url} is not valid JSON"
        ) from exc
